"""
Filter keys understood by the list_* port methods.

A filter is ``{key: value}``. A bare column name means equality; a list,
tuple or set value means membership; ``None`` means IS NULL. Suffixes
select other operators:

    col__ne        not equal
    col__lt/__lte  less than (or equal)
    col__gt/__gte  greater than (or equal)
    col__notnull   IS NOT NULL (value ignored)
    col__ilike     case-insensitive substring
"""

OPERATORS = frozenset({"eq", "in", "is", "ne", "lt", "lte", "gt", "gte", "notnull", "ilike"})


def split_filter(key: str, value: object) -> tuple[str, str]:
    """Return (column, operator) for a filter entry."""
    column, sep, op = key.partition("__")
    if sep:
        if op not in OPERATORS:
            raise ValueError(f"Unknown filter operator: {op}")
        return column, op
    if isinstance(value, (list, tuple, set, frozenset)):
        return column, "in"
    if value is None:
        return column, "is"
    return column, "eq"
