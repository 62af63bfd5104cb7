import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.core.logging import setup_logging
from app.database import Database
from app.exceptions import NotAuthorized, StoreUnavailable, ValidationError
from app.routers import auth, chat, embeddings
from app.services.conversation_service import ConversationService

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        db = database or Database(settings.database_url, echo=settings.sql_echo)
        db.open()
        app.state.database = db
        app.state.conversation_service = ConversationService(db)
        logger.info("Chat API started (store %s)", "configured" if db.is_open else "not configured")
        try:
            yield
        finally:
            db.close()

    app = FastAPI(title="Chat API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})

    @app.exception_handler(NotAuthorized)
    async def _not_authorized(request: Request, exc: NotAuthorized):
        # Same response whether the conversation is missing or owned by someone else
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": "Forbidden"})

    @app.exception_handler(StoreUnavailable)
    async def _store_unavailable(request: Request, exc: StoreUnavailable):
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": exc.message})

    app.include_router(auth.router)
    app.include_router(chat.router)
    app.include_router(embeddings.router)

    @app.get("/")
    def root():
        return {"message": "Chat API", "docs": "/docs"}

    @app.get("/health")
    def health(request: Request):
        """Store status only. Reads keep working (empty) when the store is down."""
        if request.app.state.database.ping():
            return {"database": "ok"}
        return {"database": "unavailable"}

    return app


app = create_app()
