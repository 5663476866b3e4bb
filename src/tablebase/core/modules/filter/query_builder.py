"""Pure functions for building MongoDB queries from record filters."""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from tablebase.core.modules.field.models import Field
from tablebase.core.modules.filter.models import FilterCondition, SortOrder
from tablebase.errors import BadRequestError

_SORT_DIRECTIONS: dict[SortOrder, int] = {
    SortOrder.ASC: 1,
    SortOrder.DESC: -1,
}


def resolve_filter(filter: Mapping[str, Any] | None, fields: list[Field]) -> list[FilterCondition]:
    """Resolve a field-name keyed filter against the fields of one base.

    When several fields share a name the first one (in creation order) wins.

    Args:
        filter: Mapping of field name to the literal its value must equal
        fields: Field definitions of the base, in creation order

    Returns:
        One condition per filter entry

    Raises:
        BadRequestError: If a name does not match any field of the base
    """
    if not filter:
        return []

    conditions: list[FilterCondition] = []
    for field_name, literal in filter.items():
        field = next((f for f in fields if f.name == field_name), None)
        if field is None:
            raise BadRequestError(f"Field '{field_name}' not found")
        conditions.append(FilterCondition(field_id=field.id, field_name=field_name, value=literal))
    return conditions


def build_condition_expr(condition: FilterCondition) -> dict[str, Any]:
    """Build an aggregation expression matching one condition on a value document.

    ``$literal`` keeps strings starting with '$' from being read as field paths,
    and ``$eq`` inside ``$expr`` compares whole values, so "a" does not match ["a", "b"].
    """
    return {
        "$and": [
            {"$eq": ["$field_id", condition.field_id]},
            {"$eq": ["$value", {"$literal": condition.value}]},
        ]
    }


def build_values_pipeline(conditions: list[FilterCondition]) -> list[dict[str, Any]]:
    """Build the aggregation over the values collection that yields IDs of records matching every condition.

    Each output document is ``{"_id": <record_id>}``.
    """
    field_ids = list(dict.fromkeys(condition.field_id for condition in conditions))
    return [
        {"$match": {"field_id": {"$in": field_ids}}},
        {"$match": {"$expr": {"$or": [build_condition_expr(condition) for condition in conditions]}}},
        {"$group": {"_id": "$record_id", "matched": {"$addToSet": "$field_id"}}},
        {"$match": {"matched": {"$size": len(field_ids)}}},
        {"$project": {"_id": 1}},
    ]


def build_records_query(base_id: UUID, record_ids: list[UUID] | None = None) -> dict[str, Any]:
    """Build the records query for a base, optionally restricted to matched record IDs."""
    query: dict[str, Any] = {"base_id": base_id}
    if record_ids is not None:
        query["_id"] = {"$in": record_ids}
    return query


def build_records_sort(sort: SortOrder) -> list[tuple[str, int]]:
    """Sort by creation time, ties broken by ID in the same direction."""
    direction = _SORT_DIRECTIONS[sort]
    return [("created_at", direction), ("_id", direction)]
