"""Dashboard view pipeline.

filter -> group -> sort groups -> left search -> select -> detail search -> detail sort

Every stage is a pure function over an immutable snapshot and state, so the
whole derivation is recomputed on demand. No stage raises for bad data: null
fields, unknown priorities and unparseable dates degrade to a last-rank or
epoch-0 position instead.
"""

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from app.derived_views.rows import (
    VIEW_LABELS,
    DashboardRow,
    DashboardSnapshot,
    FacilityPreliveRow,
    ProviderFacilityRow,
    ProviderLicenseRow,
    ProviderPrivilegeRow,
    ViewKey,
)
from app.derived_views.state import (
    BooleanFilter,
    DashboardFilters,
    DashboardState,
    GroupSortField,
    SortDirection,
    select_group,
)

logger = logging.getLogger("credtrack.dashboard")

PRIORITY_ORDER = ("superstat", "stat", "top", "high", "medium")
DATE_PLACEHOLDER = "—"

_NON_LETTERS = re.compile(r"[^a-z]")


# ── Value helpers ──


def normalize(value: str | None) -> str:
    return (value or "").strip().lower()


def priority_rank(value: str | None) -> int:
    """Position in PRIORITY_ORDER after lowercasing and dropping non-letters; unknown ranks last."""
    cleaned = _NON_LETTERS.sub("", normalize(value))
    try:
        return PRIORITY_ORDER.index(cleaned)
    except ValueError:
        return len(PRIORITY_ORDER)


def sort_priorities(values: Iterable[str]) -> list[str]:
    return sorted(values, key=lambda v: (priority_rank(v), v))


def matches_boolean_filter(value: bool | None, selected: BooleanFilter | str) -> bool:
    """Tri-state match. A null value only passes the ``all`` filter."""
    selected = BooleanFilter(selected)
    if selected == BooleanFilter.all:
        return True
    if selected == BooleanFilter.yes:
        return value is True
    return value is False


def _matches(value: str | None, selected: str) -> bool:
    return selected == "all" or normalize(value) == normalize(selected)


def _parse_iso(value: str) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_epoch_ms(value: str | None) -> int:
    """ISO date/datetime to epoch milliseconds. Missing or unparseable is 0."""
    if not value:
        return 0
    try:
        return int(_parse_iso(value).timestamp() * 1000)
    except (TypeError, ValueError, OverflowError):
        return 0


def format_date(value: str | None) -> str:
    """M/D/YYYY for display, placeholder for missing or unparseable values."""
    if not value:
        return DATE_PLACEHOLDER
    try:
        parsed = _parse_iso(value)
    except (TypeError, ValueError):
        return DATE_PLACEHOLDER
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


DATE_FIELDS: dict[str, tuple[str, ...]] = {
    "pfc": (),
    "prelive": ("go_live_date", "credentialing_due_date", "board_meeting_date"),
    "license": ("starts_at", "expires_at"),
    "privilege": ("current_priv_init_date", "current_priv_end_date", "term_date"),
}


def display_dates(row: DashboardRow) -> dict[str, str]:
    """Formatted date columns for one detail row, keyed by field name."""
    return {name: format_date(getattr(row, name)) for name in DATE_FIELDS[row.kind]}


def _tri_state(value: bool | None) -> int:
    if value is None:
        return -1
    return int(value)


# ── Filter stage ──


def rows_for_view(view: ViewKey, snapshot: DashboardSnapshot) -> Sequence[DashboardRow]:
    if view in (ViewKey.provider_facility, ViewKey.facility_provider):
        return snapshot.provider_facility_rows
    if view == ViewKey.facility_prelive:
        return snapshot.facility_prelive_rows
    if view == ViewKey.provider_license:
        return snapshot.provider_license_rows
    return snapshot.provider_privilege_rows


def _pfc_matches(row: ProviderFacilityRow, f: DashboardFilters) -> bool:
    return (
        _matches(row.priority, f.priority)
        and _matches(row.decision, f.status)
        and _matches(row.facility_type, f.facility_type)
        and matches_boolean_filter(row.application_required, f.application)
        and _matches(row.facility_state, f.facility_state)
    )


def _prelive_matches(row: FacilityPreliveRow, f: DashboardFilters) -> bool:
    return (
        _matches(row.priority, f.priority)
        and _matches(row.facility_state, f.facility_state)
        and matches_boolean_filter(row.temps_possible, f.temps_possible)
        and matches_boolean_filter(row.payor_enrollment_required, f.payor_enrollment)
    )


def _license_matches(row: ProviderLicenseRow, f: DashboardFilters) -> bool:
    return (
        _matches(row.priority, f.priority)
        and _matches(row.status, f.status)
        and _matches(row.path, f.license_path)
        and _matches(row.initial_or_renewal, f.license_cycle)
    )


def _privilege_matches(row: ProviderPrivilegeRow, f: DashboardFilters) -> bool:
    # Tier is a closed set, so this one is an exact comparison
    return f.privilege_tier == "all" or row.privilege_tier == f.privilege_tier


_ROW_PREDICATES: dict[str, Callable[[DashboardRow, DashboardFilters], bool]] = {
    "pfc": _pfc_matches,
    "prelive": _prelive_matches,
    "license": _license_matches,
    "privilege": _privilege_matches,
}


def filter_rows(
    view: ViewKey, snapshot: DashboardSnapshot, filters: DashboardFilters
) -> list[DashboardRow]:
    """Rows of the view's relation passing every active filter (logical AND)."""
    return [
        row for row in rows_for_view(view, snapshot)
        if _ROW_PREDICATES[row.kind](row, filters)
    ]


# ── Grouping stage ──


class RowGroup(BaseModel):
    model_config = {"frozen": True}

    key: str
    label: str
    subtitle: str | None = None
    rows: tuple[DashboardRow, ...]


def _provider_key(row) -> str:
    # Unnamed providers without an id collapse into one group by display name
    return row.provider_id if row.provider_id is not None else row.provider_name


def _facility_key(row) -> str:
    return row.facility_id if row.facility_id is not None else row.facility_name


# view -> (key, label, subtitle)
_GROUPINGS: dict[ViewKey, tuple[Callable, Callable, Callable]] = {
    ViewKey.provider_facility: (
        _provider_key, lambda r: r.provider_name, lambda r: r.provider_degree,
    ),
    ViewKey.facility_provider: (
        _facility_key, lambda r: r.facility_name, lambda r: r.facility_state,
    ),
    ViewKey.facility_prelive: (
        _facility_key, lambda r: r.facility_name, lambda r: r.facility_state,
    ),
    ViewKey.provider_license: (
        _provider_key, lambda r: r.provider_name, lambda r: r.provider_degree,
    ),
}


def is_grouped(view: ViewKey) -> bool:
    return view in _GROUPINGS


def group_rows(view: ViewKey, rows: Iterable[DashboardRow]) -> list[RowGroup]:
    """Partition rows by group key in order of first appearance.

    Label and subtitle come from the first row seen for each key. The
    privileges view is not grouped and yields no groups.
    """
    if view not in _GROUPINGS:
        return []
    key_fn, label_fn, subtitle_fn = _GROUPINGS[view]

    buckets: dict[str, list[DashboardRow]] = {}
    for row in rows:
        buckets.setdefault(key_fn(row), []).append(row)

    return [
        RowGroup(
            key=key,
            label=label_fn(members[0]),
            subtitle=subtitle_fn(members[0]),
            rows=tuple(members),
        )
        for key, members in buckets.items()
    ]


def sort_groups(
    groups: Sequence[RowGroup],
    field: GroupSortField,
    direction: SortDirection,
) -> list[RowGroup]:
    """Stable sort by lower-cased label or by the first row's updated_at."""
    if field == GroupSortField.name:
        key = lambda g: g.label.lower()  # noqa: E731
    else:
        key = lambda g: parse_epoch_ms(g.rows[0].updated_at) if g.rows else 0  # noqa: E731
    return sorted(groups, key=key, reverse=direction == SortDirection.desc)


def search_groups(groups: Sequence[RowGroup], query: str) -> list[RowGroup]:
    q = normalize(query)
    if not q:
        return list(groups)
    return [g for g in groups if q in f"{g.label} {g.subtitle or ''}".lower()]


def reconcile_selection(groups: Sequence[RowGroup], selected_key: str | None) -> str | None:
    """Keep the selection while it is still listed, otherwise fall back to the first group."""
    if not groups:
        return None
    if selected_key is None or all(g.key != selected_key for g in groups):
        return groups[0].key
    return selected_key


# ── Detail stage ──


def _search_text(row: DashboardRow) -> str:
    if row.kind == "pfc":
        parts = [
            row.provider_name, row.facility_name, row.facility_state, row.priority,
            row.privileges, row.decision, row.facility_type,
        ]
    elif row.kind == "prelive":
        parts = [row.facility_name, row.facility_state, row.priority, " ".join(row.roles_needed)]
    elif row.kind == "license":
        parts = [
            row.provider_name, row.state, row.priority, row.path, row.status,
            row.initial_or_renewal,
        ]
    else:
        parts = [row.provider_name, row.provider_degree, row.privilege_tier, row.term_reason]
    return " ".join(p or "" for p in parts).lower()


def search_rows(rows: Iterable[DashboardRow], query: str) -> list[DashboardRow]:
    q = normalize(query)
    if not q:
        return list(rows)
    return [row for row in rows if q in _search_text(row)]


_PFC_SORT_KEYS: dict[str, Callable] = {
    "facility": lambda r: r.facility_name,
    "provider": lambda r: r.provider_name,
    "priority": lambda r: priority_rank(r.priority),
    "privileges": lambda r: r.privileges or "",
    "status": lambda r: r.decision or "",
    "type": lambda r: r.facility_type or "",
    "application": lambda r: _tri_state(r.application_required),
}

DETAIL_SORT_KEYS: dict[ViewKey, dict[str, Callable]] = {
    ViewKey.provider_facility: _PFC_SORT_KEYS,
    ViewKey.facility_provider: _PFC_SORT_KEYS,
    ViewKey.facility_prelive: {
        "facility": lambda r: r.facility_name,
        "priority": lambda r: priority_rank(r.priority),
        "go_live": lambda r: parse_epoch_ms(r.go_live_date),
        "credentialing_due": lambda r: parse_epoch_ms(r.credentialing_due_date),
        "board_meeting": lambda r: parse_epoch_ms(r.board_meeting_date),
    },
    ViewKey.provider_license: {
        "state": lambda r: r.state or "",
        "priority": lambda r: priority_rank(r.priority),
        "path": lambda r: r.path or "",
        "status": lambda r: r.status or "",
        "initial_or_renewal": lambda r: r.initial_or_renewal or "",
        "requested": lambda r: parse_epoch_ms(r.starts_at),
        "final_date": lambda r: parse_epoch_ms(r.expires_at),
    },
    ViewKey.provider_privileges: {
        "provider": lambda r: r.provider_name,
        "tier": lambda r: r.privilege_tier or "",
        "init_date": lambda r: parse_epoch_ms(r.current_priv_init_date),
        "end_date": lambda r: parse_epoch_ms(r.current_priv_end_date),
        "term_date": lambda r: parse_epoch_ms(r.term_date),
    },
}


def sort_detail_rows(
    view: ViewKey,
    rows: Sequence[DashboardRow],
    field: str | None,
    direction: SortDirection,
) -> list[DashboardRow]:
    """Stable sort on one named column. No column, or one the view lacks, keeps row order."""
    key = DETAIL_SORT_KEYS[view].get(field) if field else None
    if key is None:
        return list(rows)
    return sorted(rows, key=key, reverse=direction == SortDirection.desc)


# ── Filter options ──


class FilterOptions(BaseModel):
    priorities: list[str]
    statuses: list[str]
    facility_types: list[str]
    facility_states: list[str]
    license_paths: list[str]
    license_cycles: list[str]
    privilege_tiers: list[str]


def _distinct(values: Iterable[str | None]) -> set[str]:
    return {v for v in values if v}


def filter_options(snapshot: DashboardSnapshot) -> FilterOptions:
    pfc = snapshot.provider_facility_rows
    prelive = snapshot.facility_prelive_rows
    licenses = snapshot.provider_license_rows
    return FilterOptions(
        priorities=sort_priorities(_distinct(
            [r.priority for r in pfc] + [r.priority for r in prelive]
            + [r.priority for r in licenses]
        )),
        statuses=sorted(_distinct([r.decision for r in pfc] + [r.status for r in licenses])),
        facility_types=sorted(_distinct(r.facility_type for r in pfc)),
        facility_states=sorted(_distinct(
            [r.facility_state for r in pfc] + [r.facility_state for r in prelive]
        )),
        license_paths=sorted(_distinct(r.path for r in licenses)),
        license_cycles=sorted(_distinct(r.initial_or_renewal for r in licenses)),
        privilege_tiers=sorted(_distinct(r.privilege_tier for r in snapshot.provider_privilege_rows)),
    )


# ── Orchestration ──


class GroupSummary(BaseModel):
    key: str
    label: str
    subtitle: str | None = None
    row_count: int


class DashboardView(BaseModel):
    """Everything one render of the dashboard needs."""

    view: ViewKey
    view_label: str
    state: DashboardState
    groups: list[GroupSummary]
    total_groups: int
    selected_key: str | None
    selected_label: str | None = None
    selected_subtitle: str | None = None
    filtered_count: int
    rows: list[DashboardRow]
    # Parallel to ``rows``; raw ISO values stay on the rows for sorting.
    display_dates: list[dict[str, str]] = Field(default_factory=list)
    record_count: int
    is_empty: bool
    detail_sort_fields: list[str]
    filter_options: FilterOptions


def compute_view(snapshot: DashboardSnapshot, state: DashboardState) -> DashboardView:
    """Run the full pipeline for the state's active view.

    The returned ``state`` carries the reconciled selection; callers keep it
    for the next render.
    """
    view = state.view
    filtered = filter_rows(view, snapshot, state.filters)

    if is_grouped(view):
        grouped = sort_groups(
            group_rows(view, filtered), state.group_sort_field, state.group_sort_direction
        )
        active = search_groups(grouped, state.left_search)
        selected_key = reconcile_selection(active, state.selected_key)
        selected = next((g for g in active if g.key == selected_key), None)
        detail_source: Sequence[DashboardRow] = selected.rows if selected else ()
    else:
        # Privileges show every filtered row, no left panel
        grouped, active, selected_key, selected = [], [], None, None
        detail_source = filtered

    detail = sort_detail_rows(
        view,
        search_rows(detail_source, state.right_search),
        state.detail_sort_field,
        state.detail_sort_direction,
    )

    if selected_key != state.selected_key:
        state = select_group(state, selected_key)

    logger.debug(
        "view=%s filtered=%d groups=%d/%d selected=%s rows=%d",
        view.value, len(filtered), len(active), len(grouped), selected_key, len(detail),
    )

    return DashboardView(
        view=view,
        view_label=VIEW_LABELS[view],
        state=state,
        groups=[
            GroupSummary(key=g.key, label=g.label, subtitle=g.subtitle, row_count=len(g.rows))
            for g in active
        ],
        total_groups=len(grouped),
        selected_key=selected_key,
        selected_label=selected.label if selected else None,
        selected_subtitle=selected.subtitle if selected else None,
        filtered_count=len(filtered),
        rows=detail,
        display_dates=[display_dates(row) for row in detail],
        record_count=len(detail),
        is_empty=not detail,
        detail_sort_fields=list(DETAIL_SORT_KEYS[view]),
        filter_options=filter_options(snapshot),
    )
