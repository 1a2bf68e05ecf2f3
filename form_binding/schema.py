from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Union

# Scalar values callers may supply for a field. None means "absent".
FormValue = Union[str, int, float, bool, None]


class FieldKind(str, Enum):
    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO_GROUP = "radio"
    DROPDOWN = "dropdown"


@dataclass
class FormField:
    """Read-only snapshot of one form field.

    Handles returned by the codec are live and tied to an open document; this
    is what gets handed back to callers who only want to know what a form
    contains (names to key their data on, allowed option values).
    """
    name: str
    kind: FieldKind
    options: List[str] = field(default_factory=list)
    page: int = 0
    widget_count: int = 1

    def to_public(self) -> Dict[str, Any]:  # stable outward shape
        return {
            "name": self.name,
            "field_type": self.kind.value,
            "page": self.page,
            **({"options": list(self.options)} if self.options else {}),
        }
