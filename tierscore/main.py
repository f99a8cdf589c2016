import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load env from tierscore/.env
package_dir = os.path.dirname(os.path.abspath(__file__))
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv(dotenv_path=os.path.join(package_dir, ".env"))

from tierscore.core.config import settings, validate_config  # noqa: E402
from tierscore.core.logging import configure_logging  # noqa: E402
from tierscore.core.middleware.request_id import RequestIdMiddleware  # noqa: E402
from tierscore.core.validation import validate_env  # noqa: E402
from tierscore.core.errors import (  # noqa: E402
    AppError,
    app_error_handler,
    http_error_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from tierscore.api import entitlements, health, partnertech, plans  # noqa: E402

configure_logging(settings.ENV, settings.LOG_LEVEL)
validate_env()
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("tierscore")
    logger.info("Starting tierscore service...")
    try:
        yield
    finally:
        logging.getLogger("tierscore").info("Stopping tierscore service...")


app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)

app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(health.root_router, tags=["health"])
app.include_router(plans.router, tags=["plans"])
app.include_router(entitlements.router, tags=["entitlements"])
app.include_router(partnertech.router, tags=["partnertech"])
