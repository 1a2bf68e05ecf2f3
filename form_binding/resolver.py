"""Value resolution and coercion shared by the filler and the reader.

Provides:
  - base_name(name, marker) -> canonical prefix of a suffixed clone name
  - resolve_value(name, data, marker) -> the entry to apply to a field
  - value_to_text(value) -> the one string rendering used for every field kind
  - is_checked_value(value) -> checkbox truthiness over a closed literal set
"""
from __future__ import annotations
from typing import Mapping, Optional

from .config import SUFFIX_MARKER, CHECKBOX_TRUE_LITERALS
from .schema import FormValue


def base_name(name: str, marker: str = SUFFIX_MARKER) -> Optional[str]:
    if not marker or marker not in name:
        return None
    return name.split(marker, 1)[0]


def resolve_value(name: str, data: Mapping[str, FormValue], marker: str = SUFFIX_MARKER) -> FormValue:
    # Presence wins, even when the caller mapped the key to None
    if name in data:
        return data[name]
    base = base_name(name, marker)
    if base is not None and base in data:
        return data[base]
    return None


class ValueResolver:
    """Resolver bound to one suffix marker."""

    def __init__(self, marker: str = SUFFIX_MARKER):
        self.marker = marker

    def resolve(self, name: str, data: Mapping[str, FormValue]) -> FormValue:
        return resolve_value(name, data, self.marker)

    def alias_for(self, name: str) -> Optional[str]:
        return base_name(name, self.marker)


def value_to_text(value: FormValue) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_checked_value(value: FormValue) -> bool:
    text = value_to_text(value)
    if text is None:
        return False
    return text.lower() in CHECKBOX_TRUE_LITERALS
