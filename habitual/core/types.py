"""Sentinel for partial updates: UNSET means "leave the field alone", None means "clear it"."""

from enum import Enum
from typing import Literal


class _Unset(Enum):
    UNSET = "UNSET"


UNSET: Literal[_Unset.UNSET] = _Unset.UNSET
Unset = Literal[_Unset.UNSET]


def is_set(value: object) -> bool:
    return value is not UNSET
