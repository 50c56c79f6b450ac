import uvicorn
from fastapi import FastAPI

from quizroom.api.routes.analytics import router as analytics_router
from quizroom.api.routes.health import router as health_router
from quizroom.api.routes.quizzes import router as quizzes_router
from quizroom.api.routes.students import router as students_router
from quizroom.core.config import get_settings
from quizroom.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Quizroom API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.include_router(health_router)
    app.include_router(quizzes_router)
    app.include_router(students_router)
    app.include_router(analytics_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "quizroom.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
