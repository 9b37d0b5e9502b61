"""CLI entry point for the formwidgets demo."""

import argparse
import logging

import formwidgets.io.logging_setup
from formwidgets.core.selection_state import SelectionMode
from formwidgets.core.presentation import MobileMenuMode
from formwidgets.tui.app import FormDemoApp

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Try the formwidgets Select and form fields")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in SelectionMode],
        default=SelectionMode.CHECK.value,
        help="Selection mode of the first select (default: check)",
    )
    parser.add_argument(
        "--mobile-menu-mode",
        choices=[m.value for m in MobileMenuMode],
        default=MobileMenuMode.NATIVE.value,
        help="What small viewports render (default: native)",
    )
    parser.add_argument(
        "--small-width",
        type=int,
        default=None,
        help="Terminal width (columns) at or below which the small-viewport layout is used",
    )
    parser.add_argument(
        "--render-popup-on-focus",
        action="store_true",
        default=False,
        help="Mount the popup only while the select is open",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for the formwidgets logger (default: FORMWIDGETS_LOG_LEVEL or INFO)",
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    runtime = formwidgets.io.logging_setup.configure("formwidgets-demo", level=args.log_level)
    logger.debug("demo starting; log file %s", runtime.file_path)
    app = FormDemoApp(
        mode=args.mode,
        mobile_menu_mode=args.mobile_menu_mode,
        small_width=args.small_width,
        render_popup_on_focus=args.render_popup_on_focus,
    )
    app.run()


if __name__ == "__main__":
    main()
