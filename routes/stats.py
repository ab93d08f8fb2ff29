from datetime import datetime

from fastapi import APIRouter, Depends

from models.stats import DashboardStats
from .dependencies import get_store

router = APIRouter()

@router.get("", response_model=DashboardStats)
async def dashboard_stats(store = Depends(get_store)):
    """Due today / overdue / upcoming counts and mastery, as of now."""
    return store.get_dashboard_counts(datetime.now(store.tz))
