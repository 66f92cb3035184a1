"""
Entity resolution for edit/delete actions.

A hint is either an exact id or a fragment of the record's human-facing field
(title, description, name). Records come from the service's user-scoped list.
"""
from typing import Any, Iterable, Optional


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def find_by_id(records: Iterable[Any], record_id: Optional[str]) -> Optional[Any]:
    if not record_id:
        return None
    for record in records:
        if str(_field(record, "id")) == str(record_id):
            return record
    return None


def find_by_text(records: Iterable[Any], field: str, fragment: Optional[str]) -> Optional[Any]:
    """First record whose field contains fragment, case-insensitively."""
    if not fragment:
        return None
    needle = fragment.strip().lower()
    if not needle:
        return None
    for record in records:
        value = _field(record, field)
        if value is not None and needle in str(value).lower():
            return record
    return None


def resolve_record(
    records: Iterable[Any],
    record_id: Optional[str] = None,
    text: Optional[str] = None,
    text_field: str = "title",
) -> Optional[Any]:
    """
    Exact id match when an id is given, otherwise substring match on text_field.

    An id that matches nothing is a miss; the text hint is not consulted.
    """
    records = list(records)
    if record_id:
        return find_by_id(records, record_id)
    return find_by_text(records, text_field, text)


def resolve_check_in(records: Iterable[Any], date: Optional[str]) -> Optional[Any]:
    """Check-ins are keyed by day: match the record whose date starts with date."""
    if not date:
        return None
    for record in records:
        value = _field(record, "date")
        if value is not None and str(value)[:10] == date[:10]:
            return record
    return None
