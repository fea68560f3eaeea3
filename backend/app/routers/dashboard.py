"""Dashboard routes: raw row snapshot and computed views.

Every call reloads the snapshot; the client holds the DashboardState and
sends it back with each action.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_agent
from app.dependencies import get_db
from app.derived_views.dashboard import load_dashboard_snapshot
from app.derived_views.pipeline import DashboardView, compute_view
from app.derived_views.rows import DashboardSnapshot
from app.derived_views.state import apply_action
from app.models.agent import Agent
from app.schemas.dashboard import DashboardViewRequest

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/rows", response_model=DashboardSnapshot)
async def get_rows(
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    return await load_dashboard_snapshot(db)


@router.post("/view", response_model=DashboardView)
async def compute_dashboard_view(
    body: DashboardViewRequest,
    db: AsyncSession = Depends(get_db),
    current_agent: Agent = Depends(get_current_agent),
):
    state = body.state
    if body.action is not None:
        state = apply_action(state, body.action)
    snapshot = await load_dashboard_snapshot(db)
    return compute_view(snapshot, state)
