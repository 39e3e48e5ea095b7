"""Dashboard analytics for the caller's role."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic.alias_generators import to_camel

from talent.services.analytics import dashboard_summary
from talent.storage import Storage, get_storage
from web.auth import Principal, require_user

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/me")
async def get_my_analytics(user: Principal = Depends(require_user), storage: Storage = Depends(get_storage)):
    """Counts computed from stored activity. Keys depend on role."""
    summary = await dashboard_summary(storage, user.id, user.role)
    # Nested keys are status / interest type values and stay as they are
    return {"analytics": {to_camel(k): v for k, v in summary.items()}}
