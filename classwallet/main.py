"""
ClassWallet: FastAPI Application.

This is the entry point for the local service the desktop
client talks to. All routers are registered here.
"""

from fastapi import FastAPI

from classwallet.config import get_settings
from classwallet.logging_setup import configure_logging
from classwallet.api.health import router as health_router
from classwallet.api.students import router as students_router
from classwallet.api.wallet import router as wallet_router
from classwallet.api.session import router as session_router

settings = get_settings()
configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Classroom economy: rewards, fines and store purchases",
)

# Register routers
app.include_router(health_router)
app.include_router(students_router)
app.include_router(wallet_router)
app.include_router(session_router)
