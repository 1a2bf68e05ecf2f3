from __future__ import annotations
from enum import Enum
from typing import Optional, Sequence

from .errors import OptionMismatchError


class OptionMismatchPolicy(str, Enum):
    """How a radio group or dropdown reacts to a value outside its options."""
    FALLBACK_FIRST = "fallback-first"
    LEAVE_UNSELECTED = "leave-unselected"
    STRICT = "strict"


def select_option(value: Optional[str], options: Sequence[str],
                  policy: OptionMismatchPolicy = OptionMismatchPolicy.FALLBACK_FIRST) -> Optional[str]:
    """Pick the option to select for ``value``; None means empty selection.

    An exact match always wins. Otherwise the policy decides: the first
    declared option, nothing, or OptionMismatchError. An absent or empty
    value never raises; strict mode leaves it unselected.
    """
    if value is not None and value in options:
        return value
    policy = OptionMismatchPolicy(policy)
    if policy is OptionMismatchPolicy.STRICT:
        if value:
            raise OptionMismatchError(value, options)
        return None
    if policy is OptionMismatchPolicy.FALLBACK_FIRST and options:
        return options[0]
    return None
