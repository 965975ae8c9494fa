import logging
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from routes.deployment import router as deployment_router
from routes.generation import router as generation_router
from routes.sessions import router as sessions_router
from routes.workspaces import router as workspaces_router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler(settings.LOG_FILE)
    ]
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="SiteCraft Backend",
    description="AI website builder: natural language -> LLM -> HTML/CSS/JS or framework code",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["content-disposition"]
)

# Include routers
app.include_router(generation_router)
app.include_router(deployment_router)
app.include_router(sessions_router)
app.include_router(workspaces_router)


@app.on_event("startup")
async def startup_event():
    """Report configuration on startup."""
    logger.info("✅ SiteCraft Backend started successfully")
    logger.info(f"✅ Model: {settings.CLAUDE_MODEL} at {settings.CLAUDE_API_URL}")
    if not settings.CLAUDE_API_KEY:
        logger.warning("❌ CLAUDE_API_KEY is not set; generation requests will fail until it is configured")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    logger.debug("Health check requested")
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "model": settings.CLAUDE_MODEL,
        "generation_configured": bool(settings.CLAUDE_API_KEY),
    }


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "SiteCraft Backend API",
        "version": "1.0.0",
        "model": settings.CLAUDE_MODEL,
        "endpoints": {
            "generate": "/api/generate",
            "preview": "/api/preview",
            "export": "/api/export",
            "format": "/api/format",
            "components": "/api/components",
            "deploy": "/api/deploy (simulated)",
            "providers": "/api/deploy/providers",
            "sessions": "/api/sessions",
            "workspaces": "/api/workspaces",
            "health": "/health"
        }
    }


# Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400s"""
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.warning(f"Invalid request to {request.url.path}: {problems}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": problems}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unexpected error: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unexpected error occurred"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
