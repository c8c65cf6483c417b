"""API router aggregation."""

from fastapi import APIRouter

from routers.auth import router as auth_router
from routers.employees import router as employees_router
from routers.leave import router as leave_router
from routers.notifications import router as notifications_router
from routers.performance import router as performance_router
from routers.reports import router as reports_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["Auth"])
router.include_router(employees_router, prefix="/employees", tags=["Employees"])
router.include_router(leave_router, prefix="/leave", tags=["Leave"])
router.include_router(performance_router, prefix="/performance", tags=["Performance"])
router.include_router(reports_router, prefix="/reports", tags=["Reports"])
router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
