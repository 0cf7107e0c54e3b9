from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings
from database.db import init_db
from routes import code_editor, execution, interviews

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description="Live coding interview API: shared code sessions, remote execution and feedback",
    docs_url="/docs",
    openapi_url="/openapi.json"
)

# ============ CORS Middleware ============

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info(f"CORS enabled for origins: {settings.ALLOWED_ORIGINS}")

# ============ Event Handlers ============

@app.on_event("startup")
async def startup_event():
    """
    Initialize application on startup.
    - Create database tables
    - Log startup info
    """
    try:
        init_db()
        logger.info("✅ Application started successfully")
        logger.info(f"📊 API docs available at: http://localhost:{settings.PORT}/docs")
    except Exception as e:
        logger.error(f"❌ Failed to start application: {str(e)}")
        raise

@app.on_event("shutdown")
async def shutdown_event():
    """
    Cleanup on application shutdown.
    """
    logger.info("❌ Application shutdown")

# ============ Health Check ============

@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.
    Returns application status.
    """
    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION
    }

# ============ Include Routers ============

app.include_router(code_editor.router)
app.include_router(execution.router)
app.include_router(interviews.router)

logger.info("✅ All routers registered")

# ============ Root Endpoint ============

@app.get("/", tags=["root"])
async def root():
    """
    Root endpoint.
    Returns API information.
    """
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health"
    }

# ============ Run Application ============

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}")

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level="info"
    )
