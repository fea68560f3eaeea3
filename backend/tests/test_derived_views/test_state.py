"""Dashboard state reducer tests."""

import pytest
from pydantic import TypeAdapter, ValidationError

from app.derived_views.rows import ViewKey
from app.derived_views.state import (
    BooleanFilter,
    DashboardAction,
    DashboardFilters,
    DashboardState,
    GroupSortField,
    ResetFiltersAction,
    SetFilterAction,
    SortDirection,
    apply_action,
    reset_filters,
    select_group,
    set_filter,
    set_group_sort,
    set_left_search,
    set_right_search,
    set_view,
    toggle_detail_sort,
)

_actions = TypeAdapter(DashboardAction)


def _busy_state() -> DashboardState:
    state = DashboardState()
    state = set_filter(state, "priority", "stat")
    state = set_filter(state, "application", "yes")
    state = set_filter(state, "privilege_tier", "Full")
    state = set_group_sort(state, GroupSortField.name, SortDirection.asc)
    state = toggle_detail_sort(state, "status")
    state = set_left_search(state, "adams")
    state = set_right_search(state, "north")
    return select_group(state, "p1")


def test_defaults():
    state = DashboardState()
    assert state.view == ViewKey.provider_facility
    assert state.filters == DashboardFilters()
    assert state.group_sort_field == GroupSortField.updated
    assert state.group_sort_direction == SortDirection.desc
    assert state.detail_sort_field is None
    assert state.detail_sort_direction == SortDirection.asc
    assert state.selected_key is None


def test_reducers_do_not_mutate():
    state = DashboardState()
    changed = set_filter(state, "status", "Approved")
    assert state.filters.status == "all"
    assert changed.filters.status == "Approved"


def test_detail_sort_clicked_twice_flips_direction():
    state = toggle_detail_sort(DashboardState(), "status")
    assert (state.detail_sort_field, state.detail_sort_direction) == ("status", SortDirection.asc)

    state = toggle_detail_sort(state, "status")
    assert (state.detail_sort_field, state.detail_sort_direction) == ("status", SortDirection.desc)


def test_detail_sort_new_column_resets_to_asc():
    state = toggle_detail_sort(toggle_detail_sort(DashboardState(), "status"), "status")
    state = toggle_detail_sort(state, "priority")
    assert (state.detail_sort_field, state.detail_sort_direction) == ("priority", SortDirection.asc)


def test_reset_restores_exact_defaults():
    state = reset_filters(_busy_state())
    defaults = DashboardState()

    assert state.filters == defaults.filters
    assert state.group_sort_field == GroupSortField.updated
    assert state.group_sort_direction == SortDirection.desc
    assert state.detail_sort_field is None
    assert state.detail_sort_direction == SortDirection.asc
    # Searches and selection are not part of the reset
    assert state.left_search == "adams"
    assert state.selected_key == "p1"


def test_set_view_is_a_hard_reset_but_keeps_filters():
    state = set_view(_busy_state(), ViewKey.provider_license)
    assert state.view == ViewKey.provider_license
    assert state.selected_key is None
    assert state.left_search == ""
    assert state.right_search == ""
    assert state.detail_sort_field is None
    assert state.filters.priority == "stat"
    assert state.filters.application == BooleanFilter.yes


def test_set_filter_rejects_bad_boolean_value():
    with pytest.raises(ValidationError):
        set_filter(DashboardState(), "temps_possible", "maybe")


def test_set_filter_rejects_unknown_name():
    with pytest.raises(ValueError):
        set_filter(DashboardState(), "color", "red")


def test_apply_action_dispatch():
    state = DashboardState()
    state = apply_action(state, _actions.validate_python({"type": "set_view", "view": "facility_prelive"}))
    state = apply_action(
        state, _actions.validate_python({"type": "set_filter", "name": "temps_possible", "value": "no"})
    )
    state = apply_action(state, _actions.validate_python({"type": "sort_detail", "field": "go_live"}))
    state = apply_action(
        state, _actions.validate_python({"type": "set_search", "panel": "right", "query": "rad"})
    )
    state = apply_action(state, _actions.validate_python({"type": "select_group", "key": "f1"}))
    state = apply_action(
        state, _actions.validate_python({"type": "set_group_sort", "field": "name"})
    )

    assert state.view == ViewKey.facility_prelive
    assert state.filters.temps_possible == BooleanFilter.no
    assert state.detail_sort_field == "go_live"
    assert state.right_search == "rad"
    assert state.selected_key == "f1"
    assert state.group_sort_field == GroupSortField.name
    assert state.group_sort_direction == SortDirection.desc

    state = apply_action(state, ResetFiltersAction())
    assert state.filters.temps_possible == BooleanFilter.all


def test_set_filter_action_validates_boolean_values():
    with pytest.raises(ValidationError):
        SetFilterAction(name="application", value="sometimes")


def test_apply_action_rejects_unknown_objects():
    with pytest.raises(TypeError):
        apply_action(DashboardState(), object())
