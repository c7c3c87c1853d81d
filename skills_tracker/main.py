"""FastAPI application entry point. Configures logging, middleware and API routers."""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from skills_tracker.config import settings
from skills_tracker.database import Base, engine
import skills_tracker.models  # noqa: F401 - registers model metadata
from skills_tracker.routers import auth, users, projects, tasks, skills, comments

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("skills_tracker")

app = FastAPI(
    title="Skills Tracker",
    description="Project and task tracking with skill-based assignment",
    version="1.0.0",
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(projects.router)
app.include_router(tasks.router)
app.include_router(skills.router)
app.include_router(comments.router)


@app.on_event("startup")
def ensure_schema():
    logger.info("starting env=%s", settings.ENV)
    Base.metadata.create_all(bind=engine)
    logger.info("database schema ready")


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Skills Tracker"}


def run():
    uvicorn.run("skills_tracker.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
