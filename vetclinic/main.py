import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from pathlib import Path
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .auth import seed_admin
from .cache import log_cache_stats_periodically
from .database import init_db, new_session
from .domain.addresses import router as addresses_router
from .domain.customers import router as customers_router
from .domain.pets import router as pets_router
from .domain.schedules import pet_schedules_router
from .domain.schedules import router as schedules_router
from .errors import GENERIC_ERROR_MESSAGE, AppError, LoginRequiredError
from .routes.auth import pages_router as auth_pages_router
from .routes.auth import router as auth_router
from .routes.cache import router as cache_router
from .routes.pages import router as pages_router
from .shared.responses import failure
from .templating import templates

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

STATIC_DIR = Path(__file__).resolve().parent / "static"

VALIDATION_MESSAGES = {
    "json_invalid": "Dữ liệu JSON không hợp lệ",
    "model_attributes_type": "Dữ liệu gửi lên không hợp lệ",
    "dict_type": "Dữ liệu gửi lên không hợp lệ",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_db()
    logger.info("Database tables created successfully")

    with new_session() as db:
        seed_admin(db)

    stats_task = None
    if config.APP_ENV == "development":
        stats_task = asyncio.create_task(log_cache_stats_periodically(config.CACHE_STATS_INTERVAL))

    yield

    if stats_task:
        stats_task.cancel()
        with suppress(asyncio.CancelledError):
            await stats_task
    logger.info("Application shutting down...")


app = FastAPI(title="Vet Clinic Admin", version="1.0.0", lifespan=lifespan)


def _is_page(request: Request) -> bool:
    return request.url.path.startswith("/admin")


def _validation_error_detail(error: dict) -> dict:
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    error_type = error.get("type", "")

    if error_type in VALIDATION_MESSAGES:
        message = VALIDATION_MESSAGES[error_type]
    elif error_type == "missing":
        message = f"Trường {field} là bắt buộc" if field else "Dữ liệu gửi lên là bắt buộc"
    elif error_type == "value_error":
        message = str(error.get("msg", "")).removeprefix("Value error, ")
    else:
        message = f"Giá trị của trường {field} không hợp lệ" if field else "Dữ liệu không hợp lệ"
    return {"field": field, "message": message}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Body validation failures are 400 with the first field message as ``error``"""
    details = [_validation_error_detail(error) for error in exc.errors()]
    logger.warning(f"Validation error for {request.url.path}: {details}")
    return failure(400, details[0]["message"] if details else "Dữ liệu không hợp lệ", details)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} - {exc.message}")
    if _is_page(request):
        return templates.TemplateResponse(
            request,
            "error.html",
            {"status_code": exc.status_code, "message": exc.message},
            status_code=exc.status_code,
        )
    return failure(exc.status_code, exc.message, exc.details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return failure(exc.status_code, str(exc.detail), None)


@app.exception_handler(LoginRequiredError)
async def login_required_handler(request: Request, exc: LoginRequiredError):
    return RedirectResponse(f"/auth/signin?next={quote(exc.next_url, safe='/')}", status_code=303)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Last resort: unexpected exceptions are logged and answered with a generic 500"""
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"❌ {request.method} {request.url.path} - Unhandled error")
        return failure(500, GENERIC_ERROR_MESSAGE)


logger.info(f"CORS allowed origins: {config.ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Routes
app.include_router(auth_router)
app.include_router(auth_pages_router)
app.include_router(addresses_router)
app.include_router(customers_router)
app.include_router(pets_router)
app.include_router(pet_schedules_router)
app.include_router(schedules_router)
app.include_router(cache_router)
app.include_router(pages_router)


@app.get("/")
def root():
    return RedirectResponse("/admin", status_code=307)


@app.get("/health")
def health():
    return {"status": "healthy"}
