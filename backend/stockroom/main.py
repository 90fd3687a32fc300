import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stockroom.config import DEBUG, LOG_LEVEL, VERSION
from stockroom.database import engine, Base
from stockroom.exceptions import AppError
from stockroom.routes import auth, health, pages, password, products, users
# Import models so their tables are registered
from stockroom.models import Product, User  # noqa: F401

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create tables
Base.metadata.create_all(bind=engine)

# API docs only in DEBUG mode
app = FastAPI(
    title="Stockroom API",
    description="Inventory management: sessions, user administration and product catalog",
    version=VERSION,
    docs_url="/docs" if DEBUG else None,
    redoc_url="/redoc" if DEBUG else None,
    openapi_url="/openapi.json" if DEBUG else None,
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    body = {"success": False, "message": exc.message}
    body.update(exc.extra)
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"Invalid value for {field}" if field else "Invalid request body"
    body = {"success": False, "message": message}
    if request.url.path.startswith("/api/products"):
        body["status"] = "error"
    return JSONResponse(status_code=400, content=body)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "message": "Server error"})


app.include_router(health.router)
app.include_router(pages.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(products.router)
app.include_router(password.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("stockroom.main:app", host="0.0.0.0", port=3000, reload=DEBUG)
