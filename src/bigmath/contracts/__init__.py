"""
Contract Validation Module

Модуль для валидации и сериализации JSON-представлений значений bigmath.
"""

from .serialization import (
    DOCUMENT_KINDS,
    dumps,
    from_dict,
    loads,
    read_double,
    to_dict,
    write_double,
)
from .validators import (
    SchemaRegistry,
    detect_kind,
    get_registry,
    validate_document,
)

__all__ = [
    # Classes
    "SchemaRegistry",
    # Functions
    "get_registry",
    "detect_kind",
    "validate_document",
    # Serialization
    "DOCUMENT_KINDS",
    "to_dict",
    "from_dict",
    "dumps",
    "loads",
    "read_double",
    "write_double",
]
