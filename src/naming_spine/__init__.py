"""
naming-spine - one naming grid for PostgreSQL identifiers, two conventions.

Renders convention-independent identifier descriptors as snake_case
(PostgreSQL standard) or quoted PascalCase (domain-driven design), parses
either back, and checks that pairs name the same object.
"""

__version__ = "0.1.0"

from naming_spine.conventions import (  # noqa: E402
    Catalog,
    Convention,
    IdentifierDescriptor,
    ObjectKind,
    TableRef,
    assert_equivalent,
    equivalent,
    foreign_key_suffix,
    parse,
    render,
)
from naming_spine.core.errors import (  # noqa: E402
    AmbiguousParse,
    InconsistentPair,
    MalformedDescriptor,
    NamingError,
    UnrecognizedIdentifier,
    UnsupportedObjectKind,
)

__all__ = [
    "__version__",
    "AmbiguousParse",
    "Catalog",
    "Convention",
    "IdentifierDescriptor",
    "InconsistentPair",
    "MalformedDescriptor",
    "NamingError",
    "ObjectKind",
    "TableRef",
    "UnrecognizedIdentifier",
    "UnsupportedObjectKind",
    "assert_equivalent",
    "equivalent",
    "foreign_key_suffix",
    "parse",
    "render",
]
