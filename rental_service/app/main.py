# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, rental_engine
from shared.helpers.exception_handler import setup_exception_handlers
from . import models  # noqa: F401  registers tables on Base
from .router.inventory import availability_router, inventory_search_router
from .router.orders import order_items_router, order_warnings_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s]: %(message)s"
)

# Create all tables
Base.metadata.create_all(bind=rental_engine)

app = FastAPI(title="Rental Inventory Service API")

# Allow requests from your React app
origins = [
    "http://localhost:8080",
    "http://127.0.0.1:8003"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
setup_exception_handlers(app)

# Include routers
app.include_router(inventory_search_router.router)
app.include_router(availability_router.router)
app.include_router(order_warnings_router.router)
app.include_router(order_items_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy"}
