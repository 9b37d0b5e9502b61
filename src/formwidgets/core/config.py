"""Select configuration — everything a host sets once per render.

Invalid choices raise ValueError when the config is built; they are host
programming errors, not runtime faults.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from rich.text import Text

from formwidgets.core.options import DEFAULT_TEXT_FALLBACK, Option
from formwidgets.core.presentation import MobileMenuMode
from formwidgets.core.selection_state import SelectionMode


class GroupView(str, Enum):
    DEFAULT = "default"
    LINE = "line"  # group title shares a row with its first option


class Size(str, Enum):
    S = "s"
    M = "m"
    L = "l"
    XL = "xl"


class FieldView(str, Enum):
    DEFAULT = "default"
    FILLED = "filled"


class WidthStrategy(str, Enum):
    DEFAULT = "default"
    AVAILABLE = "available"  # stretch to the parent's width


class Theme(str, Enum):
    ON_COLOR = "alfa-on-color"
    ON_WHITE = "alfa-on-white"


DIRECTIONS: tuple[str, ...] = (
    "top-left",
    "top-center",
    "top-right",
    "left-top",
    "left-center",
    "left-bottom",
    "right-top",
    "right-center",
    "right-bottom",
    "bottom-left",
    "bottom-center",
    "bottom-right",
)

DEFAULT_DIRECTIONS: tuple[str, ...] = ("bottom-left", "bottom-right", "top-left", "top-right")


@dataclass(frozen=True)
class SelectConfig:
    mode: SelectionMode = SelectionMode.CHECK
    group_view: GroupView = GroupView.DEFAULT
    size: Size = Size.M
    view: FieldView = FieldView.DEFAULT
    theme: Theme | None = None
    width: WidthStrategy = WidthStrategy.DEFAULT
    directions: tuple[str, ...] = DEFAULT_DIRECTIONS
    equal_popup_width: bool = False
    max_height: int | None = None
    mobile_menu_mode: MobileMenuMode = MobileMenuMode.NATIVE
    render_popup_on_focus: bool = False
    hide_tick: bool = False
    label: str | None = None
    placeholder: str | None = None
    native_option_placeholder: str = DEFAULT_TEXT_FALLBACK
    mobile_title: str = DEFAULT_TEXT_FALLBACK
    hint: str | None = None
    error: str | None = None
    popup_main_offset: int = 0
    popup_secondary_offset: int = 0
    # Custom anchor content built from the checked options.
    render_button_content: Callable[[list[Option]], str | Text] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # Coerce plain strings from host code into their enums.
        object.__setattr__(self, "mode", SelectionMode(self.mode))
        object.__setattr__(self, "group_view", GroupView(self.group_view))
        object.__setattr__(self, "size", Size(self.size))
        object.__setattr__(self, "view", FieldView(self.view))
        object.__setattr__(self, "width", WidthStrategy(self.width))
        object.__setattr__(self, "mobile_menu_mode", MobileMenuMode(self.mobile_menu_mode))
        if self.theme is not None:
            object.__setattr__(self, "theme", Theme(self.theme))
        directions = tuple(self.directions)
        unknown = [d for d in directions if d not in DIRECTIONS]
        if unknown:
            raise ValueError(f"unknown popup direction(s): {', '.join(unknown)}")
        object.__setattr__(self, "directions", directions)

    @property
    def opens_upward(self) -> bool:
        return bool(self.directions) and self.directions[0].startswith("top")
