from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from studyaid.core.config import settings
from studyaid.core.logging import get_logger, log_context, setup_logging
from studyaid.apis.study.main import router as study_router
from studyaid.apis.quiz.main import router as quiz_router

import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from studyaid.modules.quiz.state import quiz_manager


setup_logging(settings.app.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    quiz_manager.start()
    logger.info("quiz session sweeper started")
    try:
        yield
    finally:
        await quiz_manager.stop()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app.name, version=settings.app.version, lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        session_id = request.path_params.get("session_id")
        logger.debug(
            "%s %s -> %d",
            request.method,
            request.url.path,
            response.status_code,
            extra=log_context(session_id),
        )
        return response

    app.include_router(study_router)
    app.include_router(quiz_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
            "mock_generation": settings.generation.use_mock,
            "live_sessions": len(quiz_manager.sessions),
        }

    return app


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        logger.error("Failed to start the server: %s", e)
