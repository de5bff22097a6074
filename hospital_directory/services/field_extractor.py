"""Read CMS fields that arrive under inconsistent names.

Records from the content store mix casing, spacing and legacy names for the
same logical field ("Branch Name" vs ``branchName``) and sometimes nest the
payload under a ``data`` key. Every lookup in the mappers goes through here.
"""
from typing import Any, Optional

ID_KEYS = ("_id", "ID", "id", "wixId")

_TRUE_VALUES = {"true", "1", "yes", "y"}
_FALSE_VALUES = {"false", "0", "no", "n"}


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def get_raw(record: Any, *keys: str) -> Any:
    """Return the first non-empty value for ``keys``, uncoerced.

    Each key is tried against the record itself and then against its
    ``data`` sub-object before moving on to the next key.
    """
    if not isinstance(record, dict):
        return None
    nested = record.get("data")
    if not isinstance(nested, dict):
        nested = {}
    for key in keys:
        value = record.get(key)
        if _is_empty(value):
            value = nested.get(key)
        if not _is_empty(value):
            return value
    return None


def get_value(record: Any, *keys: str) -> Optional[str]:
    """Return the first non-empty value for ``keys`` as a trimmed string."""
    value = get_raw(record, *keys)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def get_record_id(record: Any) -> Optional[str]:
    if isinstance(record, str):
        return record.strip() or None
    return get_value(record, *ID_KEYS)


def get_flag(record: Any, *keys: str, default: bool = False) -> bool:
    """Parse a boolean CMS flag, falling back to ``default`` when absent."""
    value = get_raw(record, *keys)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return default
