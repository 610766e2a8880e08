
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from projecthub.config import settings
from projecthub.core.exception_handlers import register_exception_handlers
from projecthub.core.logger import logger
from projecthub.db.session import init_db
from projecthub.auth.routes import router as auth_router
from projecthub.projects.routes import router as projects_router
from projecthub.documents.routes import router as documents_router
from projecthub.analytics.routes import router as analytics_router

def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(projects_router, prefix=settings.api_prefix)
    app.include_router(documents_router, prefix=settings.api_prefix)
    app.include_router(analytics_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    def on_startup():
        init_db()
        logger.info("{} running (env: {})", settings.app_name, settings.app_env)

    @app.get(f"{settings.api_prefix}/health", tags=["root"])
    def health():
        return {
            "success": True,
            "status": "OK",
            "message": f"{settings.app_name} API is running!",
            "timestamp": datetime.now(timezone.utc),
        }

    return app

app = create_app()
