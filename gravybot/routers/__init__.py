"""Aggregate FastAPI routers for inclusion in the status application."""
from . import health

all_routers = [
    health.router,
]
