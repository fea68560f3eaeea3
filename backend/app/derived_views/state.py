"""Dashboard UI state as one immutable value, plus the pure reducers that change it.

Every reducer returns a new ``DashboardState``; nothing mutates in place, so a
sequence of actions can be replayed deterministically against a snapshot.
"""

import enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator

from app.derived_views.rows import ViewKey


class SortDirection(str, enum.Enum):
    asc = "asc"
    desc = "desc"


class GroupSortField(str, enum.Enum):
    name = "name"
    updated = "updated"


class BooleanFilter(str, enum.Enum):
    all = "all"
    yes = "yes"
    no = "no"


FilterName = Literal[
    "priority",
    "status",
    "facility_type",
    "facility_state",
    "license_path",
    "license_cycle",
    "privilege_tier",
    "application",
    "temps_possible",
    "payor_enrollment",
]

BOOLEAN_FILTERS = frozenset({"application", "temps_possible", "payor_enrollment"})


class DashboardFilters(BaseModel):
    """Global filter selections. Shared across views; each view reads the ones it has fields for."""

    model_config = {"frozen": True}

    priority: str = "all"
    status: str = "all"
    facility_type: str = "all"
    facility_state: str = "all"
    license_path: str = "all"
    license_cycle: str = "all"
    privilege_tier: str = "all"
    application: BooleanFilter = BooleanFilter.all
    temps_possible: BooleanFilter = BooleanFilter.all
    payor_enrollment: BooleanFilter = BooleanFilter.all


class DashboardState(BaseModel):
    model_config = {"frozen": True}

    view: ViewKey = ViewKey.provider_facility
    left_search: str = ""
    right_search: str = ""
    filters: DashboardFilters = Field(default_factory=DashboardFilters)
    group_sort_field: GroupSortField = GroupSortField.updated
    group_sort_direction: SortDirection = SortDirection.desc
    detail_sort_field: str | None = None
    detail_sort_direction: SortDirection = SortDirection.asc
    selected_key: str | None = None


def _replace(model: BaseModel, **changes):
    # model_copy skips validation; round-trip so bad enum values are rejected
    return type(model).model_validate({**model.model_dump(), **changes})


# ── Reducers ──


def set_view(state: DashboardState, view: ViewKey) -> DashboardState:
    """Switch views: clears selection, both searches and the detail sort column. Filters stay."""
    return _replace(
        state,
        view=view,
        selected_key=None,
        left_search="",
        right_search="",
        detail_sort_field=None,
    )


def set_filter(state: DashboardState, name: FilterName, value: str) -> DashboardState:
    if name not in DashboardFilters.model_fields:
        raise ValueError(f"Unknown filter: {name}")
    return _replace(state, filters=_replace(state.filters, **{name: value}))


def set_group_sort(
    state: DashboardState,
    field: GroupSortField | None = None,
    direction: SortDirection | None = None,
) -> DashboardState:
    changes = {}
    if field is not None:
        changes["group_sort_field"] = field
    if direction is not None:
        changes["group_sort_direction"] = direction
    return _replace(state, **changes)


def toggle_detail_sort(state: DashboardState, field: str) -> DashboardState:
    """Header click: the active column flips direction, any other column starts ascending."""
    if state.detail_sort_field == field:
        flipped = (
            SortDirection.desc
            if state.detail_sort_direction == SortDirection.asc
            else SortDirection.asc
        )
        return _replace(state, detail_sort_direction=flipped)
    return _replace(state, detail_sort_field=field, detail_sort_direction=SortDirection.asc)


def set_left_search(state: DashboardState, query: str) -> DashboardState:
    return _replace(state, left_search=query)


def set_right_search(state: DashboardState, query: str) -> DashboardState:
    return _replace(state, right_search=query)


def select_group(state: DashboardState, key: str | None) -> DashboardState:
    return _replace(state, selected_key=key)


def reset_filters(state: DashboardState) -> DashboardState:
    """Every filter, the group sort and the detail sort back to defaults in one step."""
    return _replace(
        state,
        filters=DashboardFilters(),
        group_sort_field=GroupSortField.updated,
        group_sort_direction=SortDirection.desc,
        detail_sort_field=None,
        detail_sort_direction=SortDirection.asc,
    )


# ── Actions ──


class SetViewAction(BaseModel):
    type: Literal["set_view"] = "set_view"
    view: ViewKey


class SetFilterAction(BaseModel):
    type: Literal["set_filter"] = "set_filter"
    name: FilterName
    value: str

    @model_validator(mode="after")
    def _check_boolean_value(self):
        if self.name in BOOLEAN_FILTERS:
            BooleanFilter(self.value)
        return self


class SetGroupSortAction(BaseModel):
    type: Literal["set_group_sort"] = "set_group_sort"
    field: GroupSortField | None = None
    direction: SortDirection | None = None


class SortDetailAction(BaseModel):
    type: Literal["sort_detail"] = "sort_detail"
    field: str = Field(..., min_length=1, max_length=50)


class SetSearchAction(BaseModel):
    type: Literal["set_search"] = "set_search"
    panel: Literal["left", "right"]
    query: str = Field("", max_length=255)


class SelectGroupAction(BaseModel):
    type: Literal["select_group"] = "select_group"
    key: str | None = None


class ResetFiltersAction(BaseModel):
    type: Literal["reset_filters"] = "reset_filters"


DashboardAction = Annotated[
    SetViewAction
    | SetFilterAction
    | SetGroupSortAction
    | SortDetailAction
    | SetSearchAction
    | SelectGroupAction
    | ResetFiltersAction,
    Field(discriminator="type"),
]


def apply_action(state: DashboardState, action) -> DashboardState:
    if isinstance(action, SetViewAction):
        return set_view(state, action.view)
    if isinstance(action, SetFilterAction):
        return set_filter(state, action.name, action.value)
    if isinstance(action, SetGroupSortAction):
        return set_group_sort(state, action.field, action.direction)
    if isinstance(action, SortDetailAction):
        return toggle_detail_sort(state, action.field)
    if isinstance(action, SetSearchAction):
        if action.panel == "left":
            return set_left_search(state, action.query)
        return set_right_search(state, action.query)
    if isinstance(action, SelectGroupAction):
        return select_group(state, action.key)
    if isinstance(action, ResetFiltersAction):
        return reset_filters(state)
    raise TypeError(f"Unsupported dashboard action: {type(action).__name__}")
