"""
Paradise POS Register

Cart pricing, checkout and transaction capture for a retail register.
Transactions are saved to the backend when one is configured and kept
in a local journal either way.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from .core.config import settings
from .routes import cart_router, checkout_router
from .routes.deps import close_clients, session_manager

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Register service starting up...")
    logger.info(f"Transactions backend: {settings.transactions_api_url or 'not configured (local only)'}")
    logger.info(f"Default tax rate: {settings.default_tax_rate}%")

    yield

    logger.info("Register service shutting down...")
    removed = session_manager.cleanup_old_sessions(settings.session_max_age_hours)
    if removed:
        logger.info(f"Dropped {removed} idle session(s)")
    await close_clients()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Cart pricing and checkout for the Paradise POS register",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(cart_router)
app.include_router(checkout_router)


@app.get("/")
async def home():
    return {
        "message": "Paradise POS Register API",
        "docs": "/docs",
        "endpoints": {
            "sessions": "/api/sessions",
            "held_sales": "/api/held-sales",
            "transactions": "/api/transactions",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "pos-register",
        "backend_configured": settings.backend_configured,
        "active_sessions": len(session_manager.sessions),
    }


def run() -> None:
    import uvicorn

    uvicorn.run(
        "paradise_pos.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
