"""
Flotify - FastAPI Application Entrypoint

This module builds the FastAPI application with:
- CORS and security middleware
- User, artist and track routes
- Database and authentication lifecycle management
- Uniform error responses ({"status": false, "message": ...})

Run with:
    uvicorn flotify.app:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from flotify import __version__
from flotify.auth.encryption import RefreshTokenCipher
from flotify.auth.manager import AuthManager
from flotify.auth.tokens import AuthConfig, Clock, utc_now
from flotify.config import Settings, get_settings
from flotify.database import get_engine, get_session_factory, init_db
from flotify.errors import AuthError, FlotifyError
from flotify.gateway.middleware import SecurityMiddleware
from flotify.log import configure_logging, get_logger
from flotify.routes import artists_router, tracks_router, users_router


logger = get_logger(__name__)


def error_body(message: str) -> dict:
    return {"status": False, "message": message}


async def flotify_error_handler(request: Request, exc: FlotifyError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message),
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed requests are 400, reported with the first failing field."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'invalid value')}"
    else:
        message = "invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("store.error", error_type=type(exc).__name__, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("internal server error"),
    )


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    clock: Clock = utc_now,
) -> FastAPI:
    """
    Build the application.
    
    Args:
        settings: Configuration; loaded from the environment when omitted
        engine: Pre-built database engine (tests pass an in-memory one)
        clock: UTC time source for token issuance and expiry checks
        
    Returns:
        FastAPI application. Authentication state is created on startup.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
            - Create the database engine and tables
            - Build the AuthConfig from settings (fails without SECRET_KEY)
            - Attach the AuthManager to app state
        
        Shutdown:
            - Dispose the engine if this app created it
        """
        db_engine = engine or get_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        init_db(db_engine)
        session_factory = get_session_factory(db_engine)
        
        cipher = None
        if settings.REFRESH_TOKEN_ENCRYPTION:
            cipher = RefreshTokenCipher(settings.REFRESH_TOKEN_KEY)
        
        app.state.db_engine = db_engine
        app.state.db_session_factory = session_factory
        app.state.auth_manager = AuthManager(
            AuthConfig.from_settings(settings),
            session_factory,
            cipher=cipher,
            clock=clock,
        )
        logger.info(
            "app.startup",
            database=db_engine.dialect.name,
            refresh_token_encryption=settings.REFRESH_TOKEN_ENCRYPTION,
        )
        
        yield
        
        if engine is None:
            db_engine.dispose()
        logger.info("app.shutdown")
    
    app = FastAPI(
        title="Flotify",
        description="Music catalog API with JWT session auth",
        version=__version__,
        lifespan=lifespan,
    )
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "PUT"],
        allow_headers=["Authorization", "Content-Type"],
    )
    app.add_middleware(SecurityMiddleware)
    
    app.add_exception_handler(FlotifyError, flotify_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    
    app.include_router(users_router)
    app.include_router(artists_router)
    app.include_router(tracks_router)
    
    @app.get("/health", tags=["health"])
    def health_check():
        return {"status": "healthy", "version": __version__}
    
    return app
