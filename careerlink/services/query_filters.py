from __future__ import annotations

from sqlalchemy import String, cast, or_


# Characters that are escaped or structural in the serialized form of a JSON string list.
_JSON_UNSAFE = set('"\\[],')


def contains_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def ilike_any(columns, text: str):
    pattern = contains_pattern(text)
    return or_(*[col.ilike(pattern, escape="\\") for col in columns])


def json_list_clause(column, text: str, *, whole_item: bool = False):
    """Case-insensitive match of ``text`` against the items of a JSON string-list column.

    The list is compared in its serialized form (``["Python", "SQL"]``), which every
    supported dialect produces for ``CAST(col AS CHAR)``. With ``whole_item`` the text
    must equal an item; otherwise it must occur inside one.

    Returns None when ``text`` cannot be matched that way (non-ASCII, escaped or
    structural characters); callers then filter the loaded rows themselves.
    """

    if not text or not text.isascii() or not text.isprintable() or _JSON_UNSAFE & set(text):
        return None

    pattern = contains_pattern(f'"{text}"' if whole_item else text)
    return cast(column, String).ilike(pattern, escape="\\")
