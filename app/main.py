from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import uvicorn

from app.api.endpoints import messages
from app.core.config import settings
from app.core.exceptions import ApiError, INTERNAL_ERROR_MESSAGE, api_error_handler
from app.core.logging import setup_logging
from app.models.message import ApiJsonResponse
from app.services.mail_service import MailConfig, MailService
from app.utils.slack import SlackAlertSink
import logging
import json
import os

logger = logging.getLogger(__name__)

LOG_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "log_config.json")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    app.state.mail_service = MailService(
        config=MailConfig.from_settings(settings),
        alert_sink=SlackAlertSink(
            token=settings.SLACK_BOT_TOKEN, channel=settings.SLACK_ALERT_CHANNEL
        ),
    )
    logger.info(f"{settings.PROJECT_NAME} started")
    yield
    logger.info(f"{settings.PROJECT_NAME} stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API relaying project requests from the website to the team inbox",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_CORS_ORIGINS,
    allow_methods=["HEAD", "GET", "POST"],
    allow_headers=["Accept", "Content-Type"],
)

app.include_router(
    messages.router,
    prefix=settings.API_V1_STR,
    tags=["messages"],
)

app.add_exception_handler(ApiError, api_error_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiJsonResponse(msg=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ApiJsonResponse(msg=INTERNAL_ERROR_MESSAGE).model_dump(),
    )


if __name__ == "__main__":
    with open(LOG_CONFIG_PATH, "r") as file:
        LOGGING_CONFIG = json.load(file)

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=settings.DEBUG,
        log_config=LOGGING_CONFIG,
    )
