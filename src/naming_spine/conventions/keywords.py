"""
PostgreSQL reserved key words.

Taken from the "reserved" column of the SQL Key Words appendix of the
PostgreSQL manual.  These cannot be used as unquoted identifiers; a
snake_case schema or column with one of these names must be quoted in
every statement that mentions it.
"""

from __future__ import annotations

RESERVED_KEYWORDS: frozenset[str] = frozenset(
    """
    all analyse analyze and any array as asc asymmetric authorization binary both
    case cast check collate collation column concurrently constraint create cross
    current_catalog current_date current_role current_schema current_time
    current_timestamp current_user default deferrable desc distinct do else end
    except false fetch for foreign freeze from full grant group having ilike in
    initially inner intersect into is isnull join lateral leading left like limit
    localtime localtimestamp natural not notnull null offset on only or order outer
    overlaps placing primary references returning right select session_user similar
    some symmetric system_user table tablesample then to trailing true union unique
    user using variadic verbose when where window with
    """.split()
)


def is_reserved(word: str) -> bool:
    """True if ``word`` is a reserved key word (case-insensitive)."""
    return word.lower() in RESERVED_KEYWORDS
