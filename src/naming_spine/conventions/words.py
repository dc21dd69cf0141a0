"""
Word splitting and casing helpers.

Every name is reduced to a tuple of lowercase words before rendering.
Input may be PascalCase, camelCase, snake_case, kebab-case or spaced
("Order Line"); digit runs always form their own word.

    >>> split_words("OrderLine")
    ('order', 'line')
    >>> split_words("HTTPServer2")
    ('http', 'server', '2')
    >>> to_pascal(("order", "line"))
    'OrderLine'
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")
_SEPARATOR_RE = re.compile(r"[\s_\-]+")
_NAME_RE = re.compile(r"[A-Za-z0-9\s_\-]+")

# A rendered PascalCase component: starts upper-case or with a digit
PASCAL_COMPONENT_RE = re.compile(r"[A-Z0-9][A-Za-z0-9]*")
# One lowercase snake word
SNAKE_WORD_RE = re.compile(r"[a-z0-9]+")


def is_plain_name(text: str) -> bool:
    """True if ``text`` only holds ASCII letters, digits and separators."""
    return bool(_NAME_RE.fullmatch(text))


def split_words(text: str) -> tuple[str, ...]:
    """Split ``text`` into lowercase words."""
    words: list[str] = []
    for chunk in _SEPARATOR_RE.split(text.strip()):
        words.extend(w.lower() for w in _WORD_RE.findall(chunk))
    return tuple(words)


def to_pascal(words: Iterable[str]) -> str:
    """Join words as one PascalCase run."""
    return "".join(w[:1].upper() + w[1:] for w in words)


def to_snake(words: Iterable[str]) -> str:
    """Join words lowercase with underscores."""
    return "_".join(words)


def canonical(text: str) -> str:
    """Canonical PascalCase spelling of a name (``order_line`` -> ``OrderLine``).

    The result splits back into the same words, so ``canonical`` is a fixed
    point: ``"A B Product"`` and ``"ABProduct"`` both give ``"AbProduct"``.
    """
    # adjacent single letters ("A B") run together once joined
    return to_pascal(split_words(to_pascal(split_words(text))))


def snake_words(text: str) -> tuple[str, ...]:
    """Words of a rendered snake_case fragment (``order_2024`` -> order, 2024)."""
    words: list[str] = []
    for token in text.split("_"):
        words.extend(split_words(token))
    return tuple(words)


def quote(text: str) -> str:
    """Double-quote a PostgreSQL identifier."""
    return '"' + text.replace('"', '""') + '"'
