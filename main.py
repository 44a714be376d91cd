from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.config import settings
from core.logging import configure_logging, get_logger
from routes.admin import router as admin_router
from routes.ads import router as ads_router
from routes.auth import router as auth_router
from routes.dashboard import router as dashboard_router
from routes.jobs import router as jobs_router
from routes.orders import router as orders_router
from routes.products import router as products_router
from routes.restaurants import router as restaurants_router
from routes.stores import router as stores_router
from routes.users import router as users_router
from services.orders import InvalidTransition, OrderNumberExhausted
from storage import IntegrityViolation, build_storage
from storage.seed import seed_demo_data

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.storage = build_storage(settings)
    if settings.SEED_DEMO_DATA:
        seed_demo_data(app.state.storage)
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    }
    openapi_schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors(include_url=False))},
    )


@app.exception_handler(IntegrityViolation)
async def integrity_handler(request: Request, exc: IntegrityViolation):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(InvalidTransition)
async def transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(OrderNumberExhausted)
async def order_number_handler(request: Request, exc: OrderNumberExhausted):
    logger.error("Order number allocation failed: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "Could not place the order, please retry"})


@app.exception_handler(Exception)
async def unhandled_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


for router in (
    auth_router,
    users_router,
    stores_router,
    products_router,
    orders_router,
    restaurants_router,
    jobs_router,
    ads_router,
    dashboard_router,
    admin_router,
):
    app.include_router(router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "storage": settings.STORAGE_BACKEND,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
