"""
FastAPI application entry point for ClubCheck billing entitlements.

Authentication is handled upstream: the session layer attaches an
AccountContext to request.state.account_context before these routes run.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clubcheck.api.routes import billing_status
from clubcheck.api.routes import health
from clubcheck.config.billing import get_billing_config_loader

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting ClubCheck API")

    # Load billing config eagerly so a malformed file fails the deploy
    config = get_billing_config_loader().config
    logger.info("Billing config ready", extra={
        "plans": dict(config.plan_limits),
        "default_plan": config.default_plan,
    })

    if not os.getenv("DATABASE_URL"):
        logger.error(
            "DATABASE_URL is not set. Billing endpoints will return 503."
        )
        app.state.database_configured = False
    else:
        app.state.database_configured = True

    yield

    logger.info("Shutting down ClubCheck API")


app = FastAPI(
    title="ClubCheck API",
    description="Billing entitlements for gym accounts",
    version="1.0.0",
    lifespan=lifespan
)

cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health route (bypasses authentication)
app.include_router(health.router)

# Billing status (requires authenticated account context)
app.include_router(billing_status.router)
