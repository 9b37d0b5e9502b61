"""Option tree model — normalized Option/Group nodes and recursive traversals.

Host code hands the Select a nested sequence of options and groups (dicts or
ready-made nodes). Everything downstream works on the normalized tuple
produced by parse_options().

// [LAW:one-source-of-truth] flatten() is the only definition of leaf order.
//   The native control renders leaves in this order and maps indices back
//   through it, so both must agree.
// [LAW:dataflow-not-control-flow] Node = Option | Group is a tagged variant;
//   traversals dispatch on the variant, not on raw dict keys.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from rich.text import Text

OptionValue = Union[str, int]

DEFAULT_TEXT_FALLBACK = "Select:"


# ---------------------------------------------------------------------------
# Node types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Option:
    """Selectable leaf."""

    value: OptionValue
    text: str | Text = ""
    native_text: str | None = None
    checked_text: str | None = None
    description: str | Text | None = None
    icon: str | Text | None = None
    props: Mapping[str, Any] = field(default_factory=dict)

    @property
    def display(self) -> str | Text:
        """Rich display content: description overrides text."""
        return self.description if self.description else self.text

    @property
    def native_label(self) -> str:
        return self.native_text or _plain(self.text)

    @property
    def checked_label(self) -> str:
        return self.checked_text or _plain(self.text)


@dataclass(frozen=True)
class Group:
    """Named container of options and nested groups."""

    title: str | Text
    content: tuple[Node, ...] = ()


Node = Union[Option, Group]


@dataclass(frozen=True)
class MenuItem:
    """Leaf as handed to the list renderer."""

    value: OptionValue
    content: Text
    props: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MenuGroup:
    """Group as handed to the list renderer."""

    title: str | Text
    content: tuple[MenuNode, ...] = ()


MenuNode = Union[MenuItem, MenuGroup]


def _plain(value: str | Text | None) -> str:
    if value is None:
        return ""
    if isinstance(value, Text):
        return value.plain
    return str(value)


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _parse_node(raw: Any) -> Node:
    if isinstance(raw, (Option, Group)):
        return raw
    if not isinstance(raw, Mapping):
        # Bare scalars are shorthand for an option whose text is its value.
        return Option(value=raw, text=str(raw))

    content = raw.get("content")
    if raw.get("type") == "group" and content:
        return Group(
            title=raw.get("title") or "",
            content=parse_options(content),
        )

    text = raw.get("text")
    value = raw.get("value")
    if value is None:
        value = _plain(text)
    return Option(
        value=value,
        text=text if text is not None else "",
        native_text=_pick(raw, "native_text", "nativeText"),
        checked_text=_pick(raw, "checked_text", "checkedText"),
        description=raw.get("description"),
        icon=raw.get("icon"),
        props=dict(raw.get("props") or {}),
    )


def parse_options(raw: Iterable[Any] | None) -> tuple[Node, ...]:
    """Normalize host-supplied options into Option/Group nodes.

    A ``type: "group"`` entry without content is a plain option; an entry
    without a value falls back to its text. Never raises for malformed input.
    """
    if not raw:
        return ()
    return tuple(_parse_node(item) for item in raw)


# ---------------------------------------------------------------------------
# Traversals
# ---------------------------------------------------------------------------


def has_group(nodes: Sequence[Node]) -> bool:
    return any(isinstance(node, Group) for node in nodes)


def iter_leaves(nodes: Sequence[Node]) -> Iterator[Option]:
    for node in nodes:
        if isinstance(node, Group):
            yield from iter_leaves(node.content)
        else:
            yield node


def flatten(nodes: Sequence[Node]) -> tuple[Option, ...]:
    """Depth-first leaves in document order, groups elided."""
    return tuple(iter_leaves(nodes))


def first_leaf(nodes: Sequence[Node]) -> Option | None:
    """First leaf option, descending into the first group when needed."""
    if not nodes:
        return None
    head = nodes[0]
    if isinstance(head, Group):
        return first_leaf(head.content)
    return head


def checked_options(
    nodes: Sequence[Node], value: Sequence[OptionValue]
) -> list[Option]:
    """Leaves whose value is selected, in document order."""
    selected = list(value)
    return [option for option in iter_leaves(nodes) if option.value in selected]


def render_content(option: Option) -> Text:
    """Merge icon and display content into one fragment."""
    text = Text()
    if option.icon:
        text.append_text(Text(option.icon) if isinstance(option.icon, str) else option.icon)
        text.append(" ")
    display = option.display
    text.append_text(Text(display) if isinstance(display, str) else display)
    return text


def render_tree(nodes: Sequence[Node]) -> tuple[MenuNode, ...]:
    """Transform nodes into the list renderer's content shape."""
    result: list[MenuNode] = []
    for node in nodes:
        if isinstance(node, Group):
            result.append(MenuGroup(title=node.title, content=render_tree(node.content)))
        else:
            result.append(
                MenuItem(value=node.value, content=render_content(node), props=node.props)
            )
    return tuple(result)


def button_label(
    nodes: Sequence[Node],
    value: Sequence[OptionValue],
    *,
    placeholder: str | None = None,
    label: str | None = None,
) -> tuple[str, bool]:
    """Anchor text and whether it is a placeholder.

    Checked options render as their checked labels joined by commas. With
    nothing checked the placeholder, then the label, then a generic fallback
    keeps the anchor wide enough to be seen.
    """
    checked = ", ".join(option.checked_label for option in checked_options(nodes, value))
    if checked:
        return checked, False
    return placeholder or label or DEFAULT_TEXT_FALLBACK, True
