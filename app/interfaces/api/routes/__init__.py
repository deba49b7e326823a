from fastapi import FastAPI

from .answers import router as answers_router
from .auth import router as auth_router
from .follows import router as follows_router
from .health import router as health_router
from .messages import router as messages_router
from .questions import router as questions_router
from .realtime import router as realtime_router
from .users import router as users_router
from .votes import router as votes_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(questions_router)
    app.include_router(answers_router)
    app.include_router(votes_router)
    app.include_router(users_router)
    app.include_router(follows_router)
    app.include_router(messages_router)
    app.include_router(realtime_router)
