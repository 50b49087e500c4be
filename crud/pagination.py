# crud/pagination.py
import math
from typing import Any, Dict, List, Sequence, Tuple

from sqlalchemy import func
from sqlmodel import Session, select


def paginate(
    session: Session,
    model,
    conditions: Sequence[Any],
    page: int,
    limit: int,
    order_by: Sequence[Any] = (),
) -> Tuple[List[Any], int]:
    """Run the page query and a count query that share the same WHERE clause."""
    offset = (page - 1) * limit

    # 1. Count
    count_query = select(func.count()).select_from(model).where(*conditions)
    total = session.exec(count_query).one()

    # 2. Rows
    query = select(model).where(*conditions).order_by(*order_by).offset(offset).limit(limit)
    rows = session.exec(query).all()
    return list(rows), total


def page_meta(total: int, page: int, limit: int) -> Dict[str, int]:
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit) if limit > 0 else 0,
    }


def count_by(session: Session, column, conditions: Sequence[Any]) -> Dict[str, int]:
    """``{value: count}`` of ``column`` over rows matching ``conditions``."""
    query = select(column, func.count()).where(*conditions).group_by(column)
    return {value: count for value, count in session.exec(query).all()}
