"""Parsing of textual sort specifications.

A specification is a comma-separated list of "field [asc|desc]" clauses, e.g.
"author, title desc".  Field names must be mapped column attributes of the
entity; anything else raises InvalidSortError.  An empty specification sorts
by primary key so that paging stays deterministic.
"""

from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.sql.elements import ColumnElement

from repokit.domain.exceptions import InvalidSortError

_DIRECTIONS = {
    "asc": "asc",
    "ascending": "asc",
    "desc": "desc",
    "descending": "desc",
}


def parse_sorting(entity_type: type, sorting: str | None) -> list[ColumnElement]:
    mapper = inspect(entity_type)
    if sorting is None or not sorting.strip():
        return [column.asc() for column in mapper.primary_key]

    clauses: list[ColumnElement] = []
    for clause in sorting.split(","):
        tokens = clause.split()
        if not tokens or len(tokens) > 2:
            raise InvalidSortError(f"Malformed sort clause {clause.strip()!r}")
        field = tokens[0]
        direction = _DIRECTIONS.get(tokens[1].lower() if len(tokens) == 2 else "asc")
        if direction is None:
            raise InvalidSortError(f"Unknown sort direction {tokens[1]!r}")
        if field not in mapper.column_attrs:
            raise InvalidSortError(f"{entity_type.__name__} has no sortable field {field!r}")
        attribute = getattr(entity_type, field)
        clauses.append(attribute.desc() if direction == "desc" else attribute.asc())
    return clauses
