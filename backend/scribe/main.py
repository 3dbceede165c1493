import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from scribe.api.v1.api import api_router
from scribe.core.config import settings
from scribe.core.exceptions import InvalidResource, LoginRequired, MalformedGrantSet, StoreUnavailable
from scribe.core.messages import AccessMessages, BlogMessages, CommentMessages, PostMessages, UserMessages
from scribe.core.rate_limit import limiter
from scribe.db.session import init_models

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGES = {
    "blog": BlogMessages.NOT_FOUND,
    "post": PostMessages.NOT_FOUND,
    "user": UserMessages.NOT_FOUND,
    "comment": CommentMessages.NOT_FOUND,
}

app = FastAPI(
    title=settings.PROJECT_NAME,
    docs_url=f"{settings.API_V1_STR}/docs",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    redoc_url=None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Update with frontend URL(s) in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    return RedirectResponse(url=exc.location, status_code=status.HTTP_302_FOUND)


@app.exception_handler(InvalidResource)
async def invalid_resource_handler(request: Request, exc: InvalidResource) -> JSONResponse:
    # Same body for "missing" and "hidden" so existence is never confirmed
    detail = NOT_FOUND_MESSAGES.get(exc.resource, "Not Found")
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": detail})


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error("Access check failed on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": AccessMessages.STORE_UNAVAILABLE},
    )


@app.exception_handler(MalformedGrantSet)
async def malformed_grant_set_handler(request: Request, exc: MalformedGrantSet) -> JSONResponse:
    detail = AccessMessages.UNKNOWN_BLOGS if exc.kind == "blog" else AccessMessages.UNKNOWN_USERS
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail, "missing_ids": exc.missing_ids},
    )


@app.on_event("startup")
async def on_startup() -> None:
    await init_models()
