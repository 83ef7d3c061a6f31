"""
Storefront Checkout Application

Cart and checkout service behind the storefront UI.
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import cart_router, checkout_router, products_router, sessions_router
from .routes.deps import close_clients
from .core.config import settings

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Storefront checkout starting up...")
    logger.info(f"Order service: {settings.order_base_url}")
    logger.info(f"Delivery service: {settings.delivery_base_url}")

    yield

    logger.info("Storefront checkout shutting down...")
    await close_clients()


app = FastAPI(
    title="Storefront Checkout",
    description="Cart and checkout orchestration for the storefront",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sessions_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(products_router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "storefront-checkout",
        "order_service": settings.order_base_url,
        "delivery_service": settings.delivery_base_url,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront_checkout.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
