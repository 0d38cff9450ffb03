from typing import Any, Iterable, List, Optional, Sequence


def _resolve(row: Any, path: str) -> Any:
    """Follow a dotted path ("user.name") through dicts or attributes."""
    value = row
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def row_matches(row: Any, term: Optional[str], fields: Sequence[str]) -> bool:
    needle = (term or "").lower()
    if not needle:
        return True
    for path in fields:
        value = _resolve(row, path)
        if value is None:
            continue
        if needle in str(value).lower():
            return True
    return False


def filter_rows(rows: Iterable[Any], term: Optional[str], fields: Sequence[str]) -> List[Any]:
    """Case-insensitive substring search over `fields`; an empty term keeps every row."""
    return [r for r in rows if row_matches(r, term, fields)]
