"""Mode bridge between the rich popup+menu path and the native list path.

Both presentations write to the same SelectionStore. The reconciliation from
native option flags back to values is a pure function so it can be checked
without a rendering surface.

// [LAW:one-source-of-truth] Native rows are built from options.flatten();
//   values_from_native() maps indices back through the same sequence.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from formwidgets.core.options import (
    Group,
    Node,
    OptionValue,
    checked_options,
    first_leaf,
    flatten,
)
from formwidgets.core.selection_state import SelectionMode


class MobileMenuMode(str, Enum):
    NATIVE = "native"
    POPUP = "popup"


class Presentation(Enum):
    """Capability set rendered for the current viewport class."""

    CUSTOM = "custom"  # anchor + floating panel + menu
    NATIVE = "native"  # flat native list control

    @property
    def has_panel(self) -> bool:
        return self is Presentation.CUSTOM


def choose_presentation(is_mobile: bool, mobile_menu_mode: MobileMenuMode) -> Presentation:
    if is_mobile and MobileMenuMode(mobile_menu_mode) is MobileMenuMode.NATIVE:
        return Presentation.NATIVE
    return Presentation.CUSTOM


def has_empty_option(mode: SelectionMode, has_group: bool) -> bool:
    """Single-select without groups gets a disabled placeholder option first."""
    return mode is not SelectionMode.CHECK and not has_group


def has_empty_header(mode: SelectionMode, has_group: bool) -> bool:
    """Multi-select or grouped lists start with an empty disabled header.

    Native multi-selects on touch platforms pre-select or drop the first
    option when nothing precedes it; the empty header absorbs that.
    """
    return mode is SelectionMode.CHECK or has_group


@dataclass(frozen=True)
class NativeEntry:
    """One row of the native control in render order."""

    kind: Literal["header", "placeholder", "option"]
    label: str
    value: OptionValue | None = None
    depth: int = 0

    @property
    def is_option(self) -> bool:
        """Rows that count as native options (headers are not options)."""
        return self.kind != "header"

    @property
    def disabled(self) -> bool:
        return self.kind != "option"


def _group_entries(nodes: Sequence[Node], depth: int) -> list[NativeEntry]:
    entries: list[NativeEntry] = []
    for node in nodes:
        if isinstance(node, Group):
            title = node.title if isinstance(node.title, str) else node.title.plain
            entries.append(NativeEntry("header", title, depth=depth))
            entries.extend(_group_entries(node.content, depth + 1))
        else:
            entries.append(NativeEntry("option", node.native_label, node.value, depth))
    return entries


def native_entries(
    nodes: Sequence[Node],
    mode: SelectionMode,
    has_group: bool,
    placeholder: str,
) -> list[NativeEntry]:
    entries: list[NativeEntry] = []
    if has_empty_header(mode, has_group):
        entries.append(NativeEntry("header", placeholder))
    if has_empty_option(mode, has_group):
        entries.append(NativeEntry("placeholder", placeholder))
    entries.extend(_group_entries(nodes, 0))
    return entries


def values_from_native(
    nodes: Sequence[Node],
    mode: SelectionMode,
    has_group: bool,
    option_flags: Sequence[tuple[bool, bool]],
) -> list[OptionValue]:
    """Reconstruct the value list from native option flags.

    ``option_flags`` holds ``(selected, disabled)`` for every native option in
    render order, headers excluded. A leading disabled placeholder is dropped
    before indices are mapped positionally onto flatten(nodes).
    """
    drop_placeholder = has_empty_option(mode, has_group)
    kept = [
        flags
        for index, flags in enumerate(option_flags)
        if not (drop_placeholder and flags[1] and index == 0)
    ]
    leaves = flatten(nodes)
    return [
        leaves[index].value
        for index, (selected, _disabled) in enumerate(kept)
        if selected and index < len(leaves)
    ]


def native_flags_for(
    nodes: Sequence[Node],
    mode: SelectionMode,
    has_group: bool,
    value: Sequence[OptionValue],
) -> list[tuple[bool, bool]]:
    """Flags a native control shows for the given selection."""
    selected = list(value)
    if mode.is_single:
        selected = selected[:1]
    flags: list[tuple[bool, bool]] = []
    if has_empty_option(mode, has_group):
        flags.append((not selected, True))
    flags.extend((leaf.value in selected, False) for leaf in flatten(nodes))
    return flags


def should_autoselect(
    render_popup_on_focus: bool,
    mode: SelectionMode,
    nodes: Sequence[Node],
    value: Sequence[OptionValue],
) -> bool:
    return (
        render_popup_on_focus
        and mode is SelectionMode.RADIO
        and len(nodes) > 0
        and not checked_options(nodes, value)
    )


def autoselect_value(nodes: Sequence[Node]) -> list[OptionValue]:
    leaf = first_leaf(nodes)
    return [leaf.value] if leaf is not None else []
