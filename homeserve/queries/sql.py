# homeserve/queries/sql.py
from typing import Any, Dict, Iterable, List, Tuple


def check_columns(columns: Iterable[str], allowed: frozenset, table: str) -> None:
    unknown = set(columns) - allowed
    if unknown:
        raise ValueError(f"Unknown {table} column(s): {', '.join(sorted(unknown))}")


def where_clause(filters: Dict[str, Any], start: int = 1) -> Tuple[str, List[Any]]:
    """Build an AND-ed equality filter; a None value matches NULL"""
    parts = []
    params: List[Any] = []
    for column, value in filters.items():
        if value is None:
            parts.append(f"{column} IS NULL")
        else:
            params.append(value)
            parts.append(f"{column} = ${start + len(params) - 1}")
    return " AND ".join(parts) or "TRUE", params


def set_clause(changes: Dict[str, Any], start: int = 1) -> Tuple[str, List[Any]]:
    parts = []
    params: List[Any] = []
    for column, value in changes.items():
        params.append(value)
        parts.append(f"{column} = ${start + len(params) - 1}")
    return ", ".join(parts), params
