"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cardscan.config import check_session_secret, get_settings
from cardscan.db.base import Base
from cardscan.db.session import engine
from cardscan.errors import CardScanError
from cardscan.routers import contacts, dashboard, ocr, ocr_responses

logger = logging.getLogger(__name__)


def _ensure_schema() -> None:
    """Create missing tables at process start."""

    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.exception("Schema bootstrap failed; continuing without table creation.")


@asynccontextmanager
async def lifespan(_: FastAPI):
    check_session_secret(get_settings())
    _ensure_schema()
    yield


settings = get_settings()
app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CardScanError)
async def handle_card_scan_error(request: Request, exc: CardScanError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request.failed method=%s path=%s status=%d error=%s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
        # Upstream and store details stay in the log.
        message = exc.public_message
    else:
        logger.warning(
            "request.rejected method=%s path=%s status=%d error=%s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
        message = exc.message
    return JSONResponse(status_code=exc.status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    detail = first.get("msg", "Invalid request")
    message = f"{location}: {detail}" if location else detail
    logger.warning(
        "request.rejected method=%s path=%s status=400 error=%s",
        request.method,
        request.url.path,
        message,
    )
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        "request.rejected method=%s path=%s status=%d error=%s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.crashed method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


app.include_router(ocr.router, tags=["ocr"])
app.include_router(ocr_responses.router, tags=["ocr-responses"])
app.include_router(dashboard.router, tags=["dashboard"])
app.include_router(contacts.router, tags=["contacts"])


@app.get("/health")
def health() -> dict[str, str]:
    """Simple health check endpoint."""

    return {"status": "ok"}
