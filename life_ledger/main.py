from contextlib import asynccontextmanager

from fastapi import FastAPI, APIRouter, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from life_ledger.config import get_settings
from life_ledger.db.core import init_db, StorageError, UnauthorizedError, NotFoundError, ConflictError
from life_ledger.logging_config import setup_logging, get_logger
from life_ledger.routers.transactions import router as transactions_router
from life_ledger.routers.budgets import router as budgets_router
from life_ledger.routers.cards import router as cards_router
from life_ledger.routers.installments import router as installments_router
from life_ledger.routers.tasks import router as tasks_router
from life_ledger.routers.categories import router as categories_router
from life_ledger.routers.task_categories import router as task_categories_router
from life_ledger.routers.habits import router as habits_router
from life_ledger.routers.setup import router as setup_router
from life_ledger.routers.stats import router as stats_router

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    logger.info("Life Ledger API started")
    yield


app = FastAPI(title="Life Ledger API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===== ERROR BODIES =====
# Every failure is rendered as {"error": message}

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request body")
    else:
        message = "Invalid request body"
    logger.debug(f"Rejected {request.method} {request.url.path}: {message}")
    return _error(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(UnauthorizedError)
async def unauthorized_exception_handler(request: Request, exc: UnauthorizedError):
    return _error(status.HTTP_401_UNAUTHORIZED, "Unauthorized")


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(ConflictError)
async def conflict_exception_handler(request: Request, exc: ConflictError):
    return _error(status.HTTP_409_CONFLICT, str(exc))


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


api_router = APIRouter(prefix="/api")
api_router.include_router(transactions_router)
api_router.include_router(budgets_router)
api_router.include_router(cards_router)
api_router.include_router(installments_router)
api_router.include_router(tasks_router)
api_router.include_router(categories_router)
api_router.include_router(task_categories_router)
api_router.include_router(habits_router)
api_router.include_router(setup_router)
api_router.include_router(stats_router)

app.include_router(api_router)


@app.get("/")
def read_root():
    return "Server is running."
