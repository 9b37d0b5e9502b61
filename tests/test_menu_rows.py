"""Tests for menu row building and the native list's pick rules."""

from formwidgets.core.config import GroupView
from formwidgets.core.options import parse_options, render_tree
from formwidgets.core.selection_state import SelectionMode
from formwidgets.tui.menu import menu_rows

TREE = render_tree(
    parse_options(
        [
            {"value": "x", "text": "X"},
            {
                "type": "group",
                "title": "Group",
                "content": [{"value": "a", "text": "A"}, {"value": "b", "text": "B"}],
            },
        ]
    )
)


def plains(rows):
    return [row.prompt.plain for row in rows]


def test_default_view_gives_groups_their_own_disabled_row():
    rows = menu_rows(TREE, SelectionMode.CHECK, ["a"])
    assert plains(rows) == ["  X", "Group", "  ✓ A", "    B"]
    assert [row.disabled for row in rows] == [False, True, False, False]
    assert [row.item.value for row in rows if row.item] == ["x", "a", "b"]


def test_line_view_puts_title_on_first_item_row():
    rows = menu_rows(TREE, SelectionMode.CHECK, [], GroupView.LINE)
    assert len(rows) == 3
    assert rows[1].prompt.plain.startswith("Group")
    assert rows[1].item.value == "a"
    assert not any(row.disabled for row in rows)


def test_radio_markers():
    rows = menu_rows(TREE, SelectionMode.RADIO, ["x"])
    assert rows[0].prompt.plain.startswith("● ")
    assert rows[2].prompt.plain.strip().startswith("○")
