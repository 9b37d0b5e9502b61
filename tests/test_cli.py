"""Tests for the demo command line."""

import pytest

from formwidgets.cli import build_parser


def test_defaults():
    args = build_parser().parse_args([])
    assert args.mode == "check"
    assert args.mobile_menu_mode == "native"
    assert args.small_width is None
    assert args.render_popup_on_focus is False
    assert args.log_level is None


def test_overrides():
    args = build_parser().parse_args(
        [
            "--mode", "radio-check",
            "--mobile-menu-mode", "popup",
            "--small-width", "80",
            "--render-popup-on-focus",
            "--log-level", "debug",
        ]
    )
    assert args.mode == "radio-check"
    assert args.mobile_menu_mode == "popup"
    assert args.small_width == 80
    assert args.render_popup_on_focus is True
    assert args.log_level == "debug"


def test_rejects_unknown_mode():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--mode", "multi"])
