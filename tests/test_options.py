"""Tests for option tree normalization and traversals."""

from rich.text import Text

from formwidgets.core.options import (
    DEFAULT_TEXT_FALLBACK,
    Group,
    MenuGroup,
    MenuItem,
    Option,
    button_label,
    checked_options,
    first_leaf,
    flatten,
    has_group,
    parse_options,
    render_content,
    render_tree,
)

GROUPED = [
    {"type": "group", "title": "A", "content": [{"value": 1, "text": "One"}, {"value": 2, "text": "Two"}]},
    {"value": 3, "text": "Three"},
    {
        "type": "group",
        "title": "B",
        "content": [
            {"type": "group", "title": "B1", "content": [{"value": 4, "text": "Four"}]},
        ],
    },
]


class TestParseOptions:
    def test_dicts_become_options_and_groups(self):
        nodes = parse_options(GROUPED)
        assert isinstance(nodes[0], Group)
        assert nodes[0].title == "A"
        assert [o.value for o in nodes[0].content] == [1, 2]
        assert nodes[1] == Option(value=3, text="Three")

    def test_group_without_content_is_a_leaf(self):
        (node,) = parse_options([{"type": "group", "title": "Empty", "value": "e", "text": "Empty"}])
        assert isinstance(node, Option)
        assert node.value == "e"

    def test_missing_value_falls_back_to_text(self):
        (node,) = parse_options([{"text": "Plain"}])
        assert node.value == "Plain"

    def test_camel_and_snake_keys(self):
        camel, snake = parse_options(
            [
                {"value": 1, "text": "One", "nativeText": "n1", "checkedText": "c1"},
                {"value": 2, "text": "Two", "native_text": "n2", "checked_text": "c2"},
            ]
        )
        assert (camel.native_label, camel.checked_label) == ("n1", "c1")
        assert (snake.native_label, snake.checked_label) == ("n2", "c2")

    def test_bare_scalars_are_options(self):
        nodes = parse_options(["x", 7])
        assert nodes == (Option(value="x", text="x"), Option(value=7, text="7"))

    def test_none_and_empty(self):
        assert parse_options(None) == ()
        assert parse_options([]) == ()

    def test_ready_made_nodes_pass_through(self):
        option = Option(value="v", text="V")
        assert parse_options([option]) == (option,)


class TestTraversals:
    def test_flatten_is_depth_first_document_order(self):
        nodes = parse_options(GROUPED)
        assert [o.value for o in flatten(nodes)] == [1, 2, 3, 4]

    def test_has_group_looks_at_top_level(self):
        assert has_group(parse_options(GROUPED))
        assert not has_group(parse_options([{"value": 1}]))

    def test_first_leaf_descends_into_groups(self):
        assert first_leaf(parse_options(GROUPED)).value == 1
        assert first_leaf(()) is None

    def test_checked_options_keep_document_order(self):
        nodes = parse_options(GROUPED)
        assert [o.value for o in checked_options(nodes, [4, 1])] == [1, 4]

    def test_checked_options_ignore_unknown_values(self):
        nodes = parse_options(GROUPED)
        assert checked_options(nodes, [99]) == []


class TestRendering:
    def test_description_overrides_text_and_icon_is_prefixed(self):
        option = Option(value=1, text="One", description="The first", icon="*")
        assert render_content(option).plain == "* The first"

    def test_render_content_keeps_rich_styles(self):
        option = Option(value=1, text=Text("Bold", style="bold"))
        rendered = render_content(option)
        assert rendered.plain == "Bold"
        assert rendered.spans

    def test_render_tree_mirrors_structure(self):
        tree = render_tree(parse_options(GROUPED))
        assert isinstance(tree[0], MenuGroup)
        assert isinstance(tree[1], MenuItem)
        assert tree[1].content.plain == "Three"
        inner = tree[2].content[0]
        assert isinstance(inner, MenuGroup)
        assert inner.content[0].value == 4


class TestButtonLabel:
    def test_checked_labels_joined(self):
        nodes = parse_options(
            [{"value": 1, "text": "One", "checkedText": "1"}, {"value": 2, "text": "Two"}]
        )
        assert button_label(nodes, [2, 1]) == ("1, Two", False)

    def test_placeholder_then_label_then_fallback(self):
        nodes = parse_options([{"value": 1, "text": "One"}])
        assert button_label(nodes, [], placeholder="Pick", label="Label") == ("Pick", True)
        assert button_label(nodes, [], label="Label") == ("Label", True)
        assert button_label(nodes, []) == (DEFAULT_TEXT_FALLBACK, True)
