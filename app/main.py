"""FastAPI application: main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.config import get_settings
from app.infrastructure.database import engine, Base, get_db
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.core.exceptions import register_exception_handlers

# Import all models so SQLAlchemy knows about them
from app.domain.models.user import User  # noqa: F401
from app.domain.models.invitation import Invitation  # noqa: F401
from app.domain.models.bank_account import BankAccount  # noqa: F401
from app.domain.models.order import Order  # noqa: F401

# Import routers
from app.interfaces.api.auth import router as auth_router
from app.interfaces.api.admin import router as admin_router
from app.interfaces.api.invitations import router as invitations_router
from app.interfaces.api.users import router as users_router
from app.interfaces.api.profile import router as profile_router
from app.interfaces.api.agents import router as agents_router
from app.interfaces.api.orders import router as orders_router
from app.interfaces.api.manager_orders import router as manager_orders_router
from app.interfaces.api.bank_accounts import router as bank_accounts_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting Travel Agency backend", env=settings.ENVIRONMENT)

    # Create DB tables (dev only, use Alembic in production)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    yield

    logger.info("Travel Agency backend stopped")


app = FastAPI(
    title=settings.APP_NAME,
    description="Travel agency booking backend: users, invitations, orders, bank accounts and vouchers",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Error envelope for every failure path
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-ID"],
)

# Include routers
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(invitations_router)
app.include_router(users_router)
app.include_router(profile_router)
app.include_router(agents_router)
app.include_router(orders_router)
app.include_router(manager_orders_router)
app.include_router(bank_accounts_router)


@app.get("/")
def root():
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        database = "disconnected"

    return {
        "status": "ok" if database == "connected" else "degraded",
        "database": database,
        "environment": settings.ENVIRONMENT,
    }
