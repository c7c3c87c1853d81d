"""Auth service layer: password hashing, JWT issue/verify and credential checks."""

from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from skills_tracker.config import settings
from skills_tracker.errors import UnauthorizedError
from skills_tracker.models.user import User
from skills_tracker.utils.permissions import Principal

ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user_id: int, username: str, role: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "iss": settings.JWT_ISSUER,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Principal:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[ALGORITHM],
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        raise UnauthorizedError("invalid or expired token")

    sub = payload.get("sub")
    role = payload.get("role")
    if sub is None or not role:
        raise UnauthorizedError("invalid token payload")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise UnauthorizedError("invalid token payload")
    return Principal(user_id=user_id, username=str(payload.get("username") or ""), role=str(role))


def authenticate(db: Session, username: str, password: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password_hash):
        raise UnauthorizedError("invalid credentials")
    return user
