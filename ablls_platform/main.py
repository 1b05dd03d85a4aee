import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from ablls_platform.config import settings

# IMPORT ROUTERS
from ablls_platform.core.exceptions import RepositoryException
from ablls_platform.routers.errors import repository_exception_handler, validation_exception_handler
from ablls_platform.routers.health import router as health_router
from ablls_platform.routers.templates import router as templates_router
from ablls_platform.routers.sessions import router as sessions_router
from ablls_platform.routers.scoring import router as scoring_router
load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# SWAGGER UI: tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Templates"},
    {"name": "Sessions"},
    {"name": "Scoring"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

# REGISTER EXCEPTION HANDLERS
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RepositoryException, repository_exception_handler)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)       # Health
app.include_router(templates_router, prefix=settings.API_V1_PREFIX)   # Templates
app.include_router(sessions_router, prefix=settings.API_V1_PREFIX)    # Sessions
app.include_router(scoring_router, prefix=settings.API_V1_PREFIX)     # Scoring / Reports / VB mapping


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# STARTUP EVENT
@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.APP_NAME} ({settings.APP_ENV})...")
    logger.info("Swagger UI available at: http://localhost:8000/docs")


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ablls_platform.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
