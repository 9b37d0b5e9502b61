"""Modifier-class builder: a map of modifiers to Textual CSS class names.

    modifier_classes({"mode": "check", "opened": True, "disabled": False})
    -> frozenset({"-mode-check", "-opened"})
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

ModifierValue = bool | str | int | Enum | None


def modifier_classes(modifiers: Mapping[str, ModifierValue]) -> frozenset[str]:
    classes: set[str] = set()
    for name, value in modifiers.items():
        if value is None or value is False:
            continue
        if value is True:
            classes.add(f"-{name}")
            continue
        if isinstance(value, Enum):
            value = value.value
        classes.add(f"-{name}-{value}")
    return frozenset(classes)
