"""Summary: Command-line interface for Quiet Quotes.

Importance: Provides a local entry point for classification, monitoring, and settings.
Alternatives: Drive everything through the HTTP API.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from quietquotes.app import build_context
from quietquotes.background import current_category, on_installed
from quietquotes.config import AppConfig
from quietquotes.models import CONTEXT_KEY, Category
from quietquotes.preferences import InvalidPreferenceError, InvalidShortcutError
from quietquotes.scheduler import run_forever
from quietquotes.sources import HtmlPageSource, TranscriptFileSource, detect_site
from quietquotes.storage.kv_store import LOCAL


def build_parser() -> argparse.ArgumentParser:
    """Summary: Build the CLI argument parser.

    Importance: Defines supported commands for local operation.
    Alternatives: Use a CLI framework like Typer or Click.
    """

    parser = argparse.ArgumentParser(description="Quiet Quotes CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify = subparsers.add_parser("classify", help="Classify text or a text file")
    classify.add_argument("text", nargs="?", type=str, default=None)
    classify.add_argument("--file", type=str, default=None)
    classify.add_argument("--scores", action="store_true")

    watch = subparsers.add_parser("watch", help="Monitor a chat transcript or HTML snapshot")
    watch.add_argument("path", type=str)
    watch.add_argument("--host", type=str, default="chatgpt.com")
    watch.add_argument("--html", action="store_true", help="Treat the file as an HTML page")
    watch.add_argument("--once", action="store_true", help="Run a single cycle and exit")

    context = subparsers.add_parser("context", help="Show or set the stored context")
    context.add_argument("--set", dest="category", type=str, default=None)

    subparsers.add_parser("quote", help="Show a quote for the current context")
    subparsers.add_parser("newtab", help="Render the new tab snapshot")
    subparsers.add_parser("install", help="Initialize default local settings")

    subparsers.add_parser("preferences", help="Show preferences")
    set_preference = subparsers.add_parser("set-preference", help="Update a preference")
    set_preference.add_argument("key", type=str)
    set_preference.add_argument("value", type=str, help="JSON value, e.g. true, 40, \"sans\"")

    add_shortcut = subparsers.add_parser("add-shortcut", help="Pin a shortcut")
    add_shortcut.add_argument("url", type=str)
    add_shortcut.add_argument("--title", type=str, default="")

    remove_shortcut = subparsers.add_parser("remove-shortcut", help="Unpin a shortcut")
    remove_shortcut.add_argument("url", type=str)

    subparsers.add_parser("list-shortcuts", help="List pinned shortcuts")

    return parser


def _parse_value(raw: str) -> object:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def run_cli(argv: list[str] | None = None) -> int:
    """Summary: Execute CLI commands based on arguments.

    Importance: Drives local workflows without a browser.
    Alternatives: Invoke components via the HTTP API.
    """

    parser = build_parser()
    args = parser.parse_args(argv)
    config = AppConfig.from_env()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    context = build_context(config)

    if args.command == "classify":
        text = Path(args.file).read_text(encoding="utf-8") if args.file else args.text
        if text is None:
            parser.error("classify needs text or --file")
        text = text.lower()
        print(context.classifier.classify(text).value)
        if args.scores:
            for category, value in context.classifier.score(text).items():
                print(f"  {category.value}: {value}")
        return 0

    if args.command == "watch":
        path = Path(args.path)
        if args.html:
            source = HtmlPageSource(path, args.host)
        else:
            source = TranscriptFileSource(path, site=detect_site(args.host))
        monitor = context.monitor_for(source)
        if not monitor.start():
            print(f"Host {args.host} is not a recognized chat site.")
            return 0
        if args.once:
            monitor.flush()
            monitor.stop()
            print(current_category(context.store).value)
            return 0
        try:
            run_forever(context.timers)
        except KeyboardInterrupt:
            monitor.stop()
        return 0

    if args.command == "context":
        if args.category:
            try:
                category = Category(args.category.lower())
            except ValueError:
                print(f"Unknown category: {args.category}", file=sys.stderr)
                return 2
            context.store.set(LOCAL, {CONTEXT_KEY: category.value})
        print(current_category(context.store).value)
        return 0

    if args.command == "quote":
        view = context.new_tab()
        view.open()
        quote = view.state.quote
        print(f"“{quote.text}”")
        print(f"  — {quote.author}")
        indicator = view.context_indicator()
        if indicator:
            print(indicator)
        return 0

    if args.command == "newtab":
        snapshot = context.new_tab().open()
        print(snapshot.clock)
        if snapshot.date_line:
            print(snapshot.date_line)
        print(f"“{snapshot.quote}” — {snapshot.author}")
        if snapshot.context_indicator:
            print(snapshot.context_indicator)
        for shortcut in snapshot.shortcuts:
            print(f"[{shortcut.title}] {shortcut.url}")
        return 0

    if args.command == "install":
        created = on_installed(context.store, reason="install")
        print(f"Initialized {len(created)} default settings.")
        return 0

    if args.command == "preferences":
        for key, value in context.preferences.load().items():
            print(f"{key}: {json.dumps(value)}")
        return 0

    if args.command == "set-preference":
        try:
            context.preferences.save({args.key: _parse_value(args.value)})
        except InvalidPreferenceError as exc:
            print(str(exc), file=sys.stderr)
            return 2
        print("Preference saved.")
        return 0

    if args.command == "add-shortcut":
        try:
            shortcut = context.shortcuts.add(args.title, args.url)
        except InvalidShortcutError as exc:
            print(str(exc), file=sys.stderr)
            return 2
        print(f"Pinned {shortcut.title} ({shortcut.url}).")
        return 0

    if args.command == "remove-shortcut":
        try:
            removed = context.shortcuts.remove(args.url)
        except InvalidShortcutError as exc:
            print(str(exc), file=sys.stderr)
            return 2
        print("Shortcut removed." if removed else "Shortcut not found.")
        return 0 if removed else 1

    if args.command == "list-shortcuts":
        for shortcut in context.shortcuts.list_shortcuts():
            print(f"{shortcut.title}: {shortcut.url}")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(run_cli())
