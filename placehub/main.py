from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from placehub.database.database import engine, db_dependency
from placehub.database import models
from placehub.routers.authentication import router as authentication_router
from placehub.routers.places import router as places_router
from placehub.routers.comments import router as comments_router
from placehub.services.errors import PlaceHubError, ValidationFailed
from dotenv import load_dotenv
import logging
import os


load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="PlaceHub API", version="1.0.0", description="Listings and comments backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(authentication_router)
# comments live under /places/{id}/comments, so they go in before the /places/{id} catch-all
app.include_router(comments_router)
app.include_router(places_router)


models.Base.metadata.create_all(bind=engine)


# ---------- Error translation ----------
@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder({"message": exc.message, "errors": exc.errors}),
    )


@app.exception_handler(PlaceHubError)
async def placehub_error_handler(request: Request, exc: PlaceHubError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(e.get("loc", [])), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": ValidationFailed.message, "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


@app.get("/", status_code=status.HTTP_200_OK)
async def root():
    return {"message": "PlaceHub backend running"}


@app.get("/health", status_code=status.HTTP_200_OK)
async def health(db: db_dependency):
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"message": "Database unavailable"},
        )
    return {"message": "ok", "database": "connected"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
