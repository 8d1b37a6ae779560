import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.functions.routes_mobile_orders import router as mobile_orders_router
from app.api.functions.routes_mobile_sync import router as mobile_sync_router
from app.api.v1.routes_mobile_import import router as mobile_import_router
from app.api.v1.routes_orders import router as orders_router
from app.api.v1.routes_sync_updates import router as sync_updates_router
from app.api.v1.routes_tokens import router as tokens_router
from app.core.config import settings
from app.core.errors import DomainError
from app.core.logging import configure_logging
from app.db.base import create_all

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

EDGE_PREFIX = "/functions/"


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_CREATE_ALL:
        logger.info("Creating database tables")
        await create_all()
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(orders_router)
app.include_router(mobile_import_router)
app.include_router(sync_updates_router)
app.include_router(tokens_router)
app.include_router(mobile_orders_router)
app.include_router(mobile_sync_router)


def _is_edge(request: Request) -> bool:
    return request.url.path.startswith(EDGE_PREFIX)


def _edge_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    if _is_edge(request):
        return _edge_error(exc.status_code, exc.message)
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    if _is_edge(request):
        message = "Invalid order data" if request.url.path.startswith("/functions/mobile-orders") else "Invalid request data"
        return _edge_error(400, message)
    return await request_validation_exception_handler(request, exc)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if _is_edge(request):
        return _edge_error(exc.status_code, str(exc.detail))
    return await http_exception_handler(request, exc)

@app.get("/health")
async def health():
    return {"status": "ok"}
