from pydantic import BaseModel, Field

from app.derived_views.state import DashboardAction, DashboardState


class DashboardViewRequest(BaseModel):
    """Current client state plus an optional action to apply before rendering."""

    state: DashboardState = Field(default_factory=DashboardState)
    action: DashboardAction | None = None
