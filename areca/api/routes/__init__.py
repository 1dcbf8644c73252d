from __future__ import annotations

from areca.api.routes.auth import router as auth_router
from areca.api.routes.configurations import router as configurations_router
from areca.api.routes.dashboard import router as dashboard_router
from areca.api.routes.dispatch import router as dispatch_router
from areca.api.routes.employees import router as employees_router
from areca.api.routes.health import router as health_router
from areca.api.routes.payments import router as payments_router
from areca.api.routes.users import router as users_router
from areca.api.routes.work_records import router as work_records_router

__all__ = [
    "auth_router",
    "configurations_router",
    "dashboard_router",
    "dispatch_router",
    "employees_router",
    "health_router",
    "payments_router",
    "users_router",
    "work_records_router",
]
