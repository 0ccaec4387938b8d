# app/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.errors import internal_error_handler
from app.database import init_db
from app.routers import auth, comments, likes, playlists, subscriptions, tweets, user_routes, videos

load_dotenv()

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create DB tables
    init_db()
    logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENV)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS with credentials (for cookie sessions)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=settings.ALLOW_CREDENTIALS,
    allow_methods=settings.ALLOW_METHODS,
    allow_headers=settings.ALLOW_HEADERS,
)

# Store failures and anything else unexpected end here, once
app.add_exception_handler(SQLAlchemyError, internal_error_handler)
app.add_exception_handler(Exception, internal_error_handler)


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}


# Routers
app.include_router(auth.router)
app.include_router(user_routes.router)
app.include_router(subscriptions.router)
app.include_router(likes.router)
app.include_router(videos.router)
app.include_router(comments.router)
app.include_router(tweets.router)
app.include_router(playlists.router)


# Routes reachable without a session
PUBLIC_PATHS = {
    "/health",
    "/api/users/register",
    "/api/users/login",
    "/api/users/refresh-token",
}


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Paste your access_token into the Authorize button to test secured routes.",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
    }
    for route, path in openapi_schema["paths"].items():
        if route in PUBLIC_PATHS:
            continue
        for method in path.values():
            method["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
