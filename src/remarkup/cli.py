"""Command-line interface for remarkup.

Usage:
    remarkup fix page.html --site gemini -o fixed.html
    remarkup css --site gemini
    remarkup settings show
    remarkup settings set bold off
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from remarkup.sites import SiteAdapter

console = Console(stderr=True)

_ON_OFF = {"on": True, "off": False, "true": True, "false": False}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remarkup",
        description="Fix inline markup rendered incorrectly by chat pages.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="User settings JSON file (default: APP__SETTINGS_PATH)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    fix = sub.add_parser("fix", help="Re-render a saved chat page")
    fix.add_argument("file", type=Path, help="HTML file to fix")
    fix.add_argument("--site", default=None, help="Site adapter name")
    fix.add_argument("--url", default=None, help="Page URL used to detect the site")
    fix.add_argument(
        "-o", "--output", type=Path, default=None, help="Write here (default stdout)"
    )

    css = sub.add_parser("css", help="Print the generated colour style sheet")
    css.add_argument("--site", default=None, help="Site adapter name")

    settings = sub.add_parser("settings", help="Show or change feature toggles")
    settings_sub = settings.add_subparsers(dest="action", required=True)
    settings_sub.add_parser("show", help="Show current settings")
    set_cmd = settings_sub.add_parser("set", help="Turn one toggle on or off")
    set_cmd.add_argument("toggle", help="Toggle name (e.g. bold, latex)")
    set_cmd.add_argument("value", choices=sorted(_ON_OFF), help="on or off")

    return parser


def _resolve_adapter(
    site: str | None, url: str | None, con: Console
) -> SiteAdapter | None:
    from remarkup.config import get_settings
    from remarkup.sites import get_adapter, get_adapter_by_name, registered_sites

    name = site or (None if url else get_settings().app.default_site)
    adapter = get_adapter_by_name(name) if name else get_adapter(url) if url else None
    if adapter is None:
        con.print(
            "[red]Error:[/] no site adapter; pass --site "
            f"({', '.join(registered_sites())}) or --url"
        )
    return adapter


def _cmd_fix(args: argparse.Namespace, store_path: Path, con: Console) -> int:
    from selectolax.lexbor import LexborHTMLParser

    from remarkup.config import get_settings
    from remarkup.markup.math import get_math_engine
    from remarkup.orchestrator import HtmlPolicyError, ReRenderer
    from remarkup.settings_store import SettingsStore

    adapter = _resolve_adapter(args.site, args.url, con)
    if adapter is None:
        return 2
    if hasattr(adapter, "with_math_engine"):
        adapter = adapter.with_math_engine(
            get_math_engine(get_settings().app.math_engine)
        )

    try:
        source = args.file.read_text(encoding="utf-8")
    except OSError as exc:
        con.print(f"[red]Error:[/] cannot read {args.file}: {exc}")
        return 1

    document = LexborHTMLParser(source)
    renderer = ReRenderer(document, adapter, SettingsStore(store_path).load())
    try:
        stats = renderer.rerender()
    except HtmlPolicyError as exc:
        con.print(f"[red]Error:[/] {exc}")
        return 1

    result = document.html or source
    if args.output is None:
        sys.stdout.write(result)
    else:
        args.output.write_text(result, encoding="utf-8")

    if stats.skipped:
        con.print(f"[yellow]Skipped:[/] {stats.skipped}", highlight=False)
    else:
        con.print(
            f"[green]Processed[/] {stats.processed} elements, "
            f"rewrote {stats.written} ({adapter.name})",
            highlight=False,
        )
    return 0


def _cmd_css(args: argparse.Namespace, store_path: Path, con: Console) -> int:
    from remarkup.settings_store import SettingsStore
    from remarkup.styles import build_stylesheet

    adapter = _resolve_adapter(args.site, None, con)
    if adapter is None:
        return 2
    selectors = getattr(adapter, "style_selectors", {})
    sheet = build_stylesheet(SettingsStore(store_path).load().colors, selectors)
    sys.stdout.write(sheet + ("\n" if sheet else ""))
    return 0


def _cmd_settings(args: argparse.Namespace, store_path: Path, con: Console) -> int:
    from remarkup.settings_store import SettingsStore, SettingsStoreError

    store = SettingsStore(store_path)

    match args.action:
        case "set":
            try:
                settings = store.set_toggle(args.toggle, _ON_OFF[args.value])
            except KeyError as exc:
                con.print(f"[red]Error:[/] {exc.args[0]}")
                return 2
            except SettingsStoreError as exc:
                con.print(f"[red]Error:[/] {exc}")
                return 1
            con.print(f"[green]Saved[/] {args.toggle}={args.value}")
        case _:
            settings = store.load()

    table = Table(title=f"Settings ({store_path})")
    table.add_column("Toggle")
    table.add_column("Value")
    for name, value in settings.features.model_dump().items():
        table.add_row(name, "[green]on[/]" if value else "[red]off[/]")
    con.print(table)
    return 0


def run(argv: Sequence[str] | None = None, *, console: Console | None = None) -> int:
    """Parse *argv* and run one command; returns the exit status."""
    from remarkup.config import get_settings

    con = console or globals()["console"]
    args = _build_parser().parse_args(argv)
    store_path = args.settings or get_settings().app.settings_path

    match args.command:
        case "fix":
            return _cmd_fix(args, store_path, con)
        case "css":
            return _cmd_css(args, store_path, con)
        case "settings":
            return _cmd_settings(args, store_path, con)
    return 2
