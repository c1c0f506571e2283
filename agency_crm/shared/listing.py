"""Search and sorting helpers shared by list endpoints"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query


def apply_search(query: Query, search: Optional[str], *columns) -> Query:
    """Case-insensitive substring match across any of the columns"""
    if not search or not search.strip():
        return query
    term = f"%{search.strip()}%"
    return query.filter(or_(*(column.ilike(term) for column in columns)))


def apply_sort(
    query: Query,
    sortable: dict,
    sort_by: Optional[str],
    sort_dir: Optional[str],
    default: list,
) -> Query:
    """
    Order by a whitelisted column.

    Unknown sort keys fall back to the default ordering. Nulls sort last in
    both directions.
    """
    column = sortable.get(sort_by or "")
    if column is None:
        return query.order_by(*default)

    if (sort_dir or "asc").lower() == "desc":
        return query.order_by(column.is_(None), column.desc())
    return query.order_by(column.is_(None), column.asc())
