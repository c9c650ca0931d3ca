"""FastAPI application entry point."""
import logging
import time
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promptlib.config import get_settings
from promptlib.routers import api_router
from promptlib.schemas.base import ErrorResponse
from promptlib.utils.exceptions import PromptLibError, StoreError, ValidationError
from promptlib.version import APP_VERSION

settings = get_settings()

logs_dir = Path(settings.log_dir)
logs_dir.mkdir(parents=True, exist_ok=True)

log_file = logs_dir / "promptlib.log"
sql_log_file = logs_dir / "promptlib_sql.log"
api_log_file = logs_dir / "promptlib_api.log"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Rotating handlers: 1MB per general/SQL file, 2MB per API file
rotating_handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024, backupCount=5, encoding='utf-8')
rotating_handler.setFormatter(logging.Formatter(LOG_FORMAT))

sql_rotating_handler = RotatingFileHandler(sql_log_file, maxBytes=1024 * 1024, backupCount=5, encoding='utf-8')
sql_rotating_handler.setFormatter(logging.Formatter(LOG_FORMAT))

api_rotating_handler = RotatingFileHandler(api_log_file, maxBytes=2 * 1024 * 1024, backupCount=15, encoding='utf-8')
api_rotating_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))

# Force=True overrides any configuration installed earlier (e.g., by uvicorn)
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.StreamHandler(),
        rotating_handler,
    ],
    force=True,
)

logger = logging.getLogger(__name__)

api_logger = logging.getLogger("promptlib.api")
api_logger.handlers.clear()
api_logger.addHandler(api_rotating_handler)
api_logger.setLevel(logging.INFO)
api_logger.propagate = False

uvicorn_access_logger = logging.getLogger("uvicorn.access")
if rotating_handler not in uvicorn_access_logger.handlers:
    uvicorn_access_logger.addHandler(rotating_handler)


class SQLTransactionFilter(logging.Filter):
    """Drop transaction bookkeeping lines and flatten multi-line statements."""

    def filter(self, record):
        if record.levelno == logging.INFO:
            message = record.getMessage()

            if any(keyword in message for keyword in ['ROLLBACK', 'BEGIN', 'COMMIT', 'generated in', 'cached since']):
                return False

            if any(kw in message for kw in ['SELECT', 'DELETE', 'INSERT', 'UPDATE']):
                record.msg = ' '.join(message.split())
                record.args = ()

        return True


sqlalchemy_logger = logging.getLogger("sqlalchemy.engine.Engine")
sqlalchemy_logger.handlers.clear()
sqlalchemy_logger.addHandler(sql_rotating_handler)
sqlalchemy_logger.setLevel(logging.INFO if settings.environment == "development" else logging.WARNING)
sqlalchemy_logger.propagate = False
sqlalchemy_logger.addFilter(SQLTransactionFilter())


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """Log startup and shutdown."""
    logger.info("=" * 60)
    logger.info(f"Prompt Library API {APP_VERSION} starting")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Database: {settings.database_url.split('@')[-1] if '@' in settings.database_url else 'SQLite'}")
    logger.info("=" * 60)
    try:
        yield
    finally:
        from promptlib.database import engine

        await engine.dispose()
        logger.info("Prompt Library API shutting down")


app = FastAPI(
    title="Prompt Library API",
    description="Community prompt library: browse, tag, vote and share prompts",
    version=APP_VERSION,
    lifespan=lifespan,
)


def _error_body(message: str, errors: list[dict] | None = None) -> dict:
    return ErrorResponse(message=message, errors=errors).model_dump(exclude_none=True)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render request validation failures as 400 with field-level detail."""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")

    if any(error.get("type") == "json_invalid" for error in exc.errors()):
        return JSONResponse(status_code=400, content=_error_body("Invalid JSON body"))

    errors = []
    for error in exc.errors():
        loc = error.get("loc", [])
        field_path = " -> ".join(str(x) for x in loc[1:]) if len(loc) > 1 else "unknown field"
        errors.append({
            "field": field_path,
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "unknown"),
        })

    return JSONResponse(
        status_code=400,
        content=_error_body("Validation Error", errors),
    )


@app.exception_handler(PromptLibError)
async def domain_exception_handler(request: Request, exc: PromptLibError):
    """Map domain exceptions to their HTTP status without leaking store internals."""
    if isinstance(exc, StoreError):
        logger.error(f"Store failure on {request.method} {request.url.path}: {exc.__cause__!r}")
        return JSONResponse(status_code=exc.status_code, content=_error_body(StoreError.default_message))

    errors = exc.errors if isinstance(exc, ValidationError) and exc.errors else None
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, errors))


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with status and timing to the dedicated API log."""
    start_time = time.time()
    client_ip = request.client.host if request.client else "unknown"
    method = request.method
    path = request.url.path
    request_id = f"{method}:{path}:{int(start_time * 1000) % 100000}"

    api_logger.info(f">> {request_id} | START | {method} {path} | IP: {client_ip}")
    if request.query_params:
        api_logger.info(f">> {request_id} | QUERY | {request.query_params}")

    try:
        response = await call_next(request)
    except Exception as e:
        api_logger.error(
            f"<< {request_id} | EXCEPTION | {method} {path} | "
            f"Error: {str(e)[:100]} | Time: {time.time() - start_time:.3f}s"
        )
        raise

    api_logger.info(
        f"<< {request_id} | COMPLETE | {method} {path} | "
        f"Status: {response.status_code} | Time: {time.time() - start_time:.3f}s"
    )
    return response


allowed_origins = [settings.frontend_url]
if settings.environment == "development":
    allowed_origins += ["http://localhost:3000", "http://localhost:4321", "http://127.0.0.1:4321"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
