"""Error kinds raised by the service layer.

Every kind is an ``HTTPException`` so services can raise it directly and the
web layer renders it as ``{"detail": ...}`` with the matching status code.
"""

from fastapi import HTTPException, status


class ServiceError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "request failed"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "invalid credentials"

    def __init__(self, detail: str | None = None):
        super().__init__(detail)
        self.headers = {"WWW-Authenticate": "Bearer"}


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "not found"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "forbidden"


class InvalidInputError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "invalid input"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "conflict"


class PreconditionFailedError(ServiceError):
    status_code = status.HTTP_412_PRECONDITION_FAILED
    default_detail = "precondition failed"
