"""Classification of the fields of a Riak /stats document."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List


class FieldKind(Enum):
    """Shape of a top-level stats field value."""

    STRING = "string"
    NUMBER = "number"
    LIST = "list"
    OTHER = "other"


@dataclass(frozen=True)
class StatField:
    """A single top-level field of the stats document, tagged by kind."""

    name: str
    kind: FieldKind
    value: Any


def classify_field(name: str, value: Any) -> StatField:
    """
    Tag a decoded JSON value with its kind.

    Booleans decode to ``bool``, which is an ``int`` subclass in Python, so
    they are checked first and classified as OTHER.

    Args:
        name: Field name
        value: Decoded JSON value

    Returns:
        StatField: Tagged field
    """
    if isinstance(value, bool):
        kind = FieldKind.OTHER
    elif isinstance(value, str):
        kind = FieldKind.STRING
    elif isinstance(value, (int, float)):
        kind = FieldKind.NUMBER
    elif isinstance(value, list):
        kind = FieldKind.LIST
    else:
        kind = FieldKind.OTHER
    return StatField(name=name, kind=kind, value=value)


def classify_stats(document: Dict[str, Any]) -> List[StatField]:
    """Classify every top-level field of a stats document, keeping key order."""
    return [classify_field(name, value) for name, value in document.items()]
