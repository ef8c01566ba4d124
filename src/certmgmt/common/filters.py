"""
Filter mini-language used by the list endpoints.

    filter: ``status:eq:sent,name:like:inv``   (field:operator:value, comma separated)
    sort:   ``desc:createdAt,asc:name``         (direction:field)

``like`` is a case-insensitive prefix match.
"""
import re
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Enum, Integer

from certmgmt.errors import ValidationError

_OPERATORS = {
    "eq": lambda col, v: col == v,
    "neq": lambda col, v: col != v,
    "gt": lambda col, v: col > v,
    "gte": lambda col, v: col >= v,
    "lt": lambda col, v: col < v,
    "lte": lambda col, v: col <= v,
    "like": lambda col, v: col.ilike(f"{_escape_like(v)}%", escape="\\"),
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _coerce(column, value: str):
    column_type = column.property.columns[0].type
    if isinstance(column_type, Enum):
        if value not in column_type.enums:
            raise ValidationError(f"Invalid value '{value}' for field '{column.key}'")
        return value
    try:
        if isinstance(column_type, DateTime):
            return datetime.fromisoformat(value.rstrip("Z"))
        if isinstance(column_type, Boolean):
            return value.lower() in ("true", "1")
        if isinstance(column_type, Integer):
            return int(value)
    except ValueError as e:
        raise ValidationError(f"Invalid value '{value}' for field '{column.key}'") from e
    return value


def _column(model, field: str):
    name = _to_snake(field.strip())
    if name not in model.__table__.columns:
        raise ValidationError(f"Unknown field '{field}'")
    return getattr(model, name)


def create_where_clause(model, filter: Optional[str] = None) -> List:
    if not filter:
        return []
    criteria = []
    for cond in filter.split(","):
        fields = cond.split(":", 2)
        if len(fields) != 3:
            raise ValidationError(f"Invalid filter condition '{cond}'")
        field, operator, value = fields
        if operator not in _OPERATORS:
            raise ValidationError(f"Unknown filter operator '{operator}'")
        column = _column(model, field)
        criteria.append(_OPERATORS[operator](column, _coerce(column, value)))
    return criteria


def create_order_clause(model, sort: Optional[str] = None) -> List:
    if not sort:
        return []
    order = []
    for cond in sort.split(","):
        fields = cond.split(":")
        if len(fields) != 2 or fields[0].lower() not in ("asc", "desc"):
            raise ValidationError(f"Invalid sort condition '{cond}'")
        column = _column(model, fields[1])
        order.append(column.asc() if fields[0].lower() == "asc" else column.desc())
    return order
