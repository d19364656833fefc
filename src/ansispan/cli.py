from __future__ import annotations

import json
import logging
from pathlib import Path
import sys
from typing import BinaryIO, Iterable

import click

from ansispan.cache import cached_ansi_to_segments, set_cache_size
from ansispan.render.html import render_html
from ansispan.segments import Segment
from ansispan.settings import (
    Schema,
    Settings,
    SettingsError,
    load_settings,
    save_settings,
)
from ansispan.settings_schema import SCHEMA
from ansispan.styles import TABLES, StyleTable, get_table

DEFAULT_SETTINGS_PATH = "~/.ansispan.json"


class Context:
    """State shared by sub-commands."""

    def __init__(self, settings_path: Path, settings: Settings) -> None:
        self.settings_path = settings_path
        self.settings = settings

    def get_table(self, name: str | None) -> StyleTable:
        return get_table(name or self.settings.get("render.table", str))

    def read_segments(
        self, files: Iterable[BinaryIO], table_name: str | None
    ) -> Iterable[Segment]:
        table = self.get_table(table_name)
        for file in files:
            text = file.read().decode("utf-8", errors="replace")
            yield from cached_ansi_to_segments(text, table)


table_option = click.option(
    "--table",
    type=click.Choice(list(TABLES)),
    default=None,
    help="Style table (defaults to the render.table setting).",
)
files_argument = click.argument(
    "files", metavar="PATH...", type=click.File("rb"), nargs=-1
)


@click.group()
@click.option(
    "--settings",
    "settings_path",
    metavar="PATH",
    envvar="ANSISPAN_SETTINGS",
    default=DEFAULT_SETTINGS_PATH,
    show_default=True,
    help="Path to settings JSON.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug information.")
@click.pass_context
def main(ctx: click.Context, settings_path: str, verbose: bool) -> None:
    """Convert text with ANSI escape sequences in to styled segments."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )
    path = Path(settings_path).expanduser().absolute()
    try:
        settings = load_settings(path, Schema(SCHEMA))
    except SettingsError as error:
        raise click.ClickException(str(error))
    set_cache_size(settings.get("cache.size", int))
    ctx.obj = Context(path, settings)


def _get_files(files: tuple[BinaryIO, ...]) -> Iterable[BinaryIO]:
    return files or (click.get_binary_stream("stdin"),)


@main.command("html")
@files_argument
@table_option
@click.pass_obj
def html(context: Context, files: tuple, table: str | None) -> None:
    """Render PATH (or stdin) as HTML."""
    settings = context.settings
    click.echo(
        render_html(
            context.read_segments(_get_files(files), table),
            container_class=settings.get("render.container-class", str),
            pre_class=settings.get("render.pre-class", str),
            separator=settings.get("render.separator", str),
        )
    )


@main.command("json")
@files_argument
@table_option
@click.pass_obj
def json_command(context: Context, files: tuple, table: str | None) -> None:
    """Write the segments of PATH (or stdin) as JSON."""
    segments = [
        {"classes": list(classes), "content": content}
        for classes, content in context.read_segments(_get_files(files), table)
    ]
    click.echo(json.dumps(segments, indent=2))


@main.command("text")
@files_argument
@click.pass_obj
def text(context: Context, files: tuple) -> None:
    """Write PATH (or stdin) with escape sequences removed."""
    click.echo(
        "".join(
            segment.content
            for segment in context.read_segments(_get_files(files), None)
        ),
        nl=False,
    )


@main.command("view")
@click.argument("path", metavar="PATH", type=click.Path(exists=True, dir_okay=False))
def view(path: str) -> None:
    """View PATH in the terminal."""
    from ansispan.app import ANSIViewerApp

    app = ANSIViewerApp(path=Path(path))
    app.run()


@main.group("settings", invoke_without_command=True)
@click.option("--defaults", is_flag=True, help="Show default settings.")
@click.pass_context
def settings(ctx: click.Context, defaults: bool) -> None:
    """Show the settings path, or the default settings."""
    if ctx.invoked_subcommand is not None:
        return
    context: Context = ctx.obj
    if defaults:
        click.echo(
            json.dumps(
                context.settings.schema.defaults, indent=4, separators=(", ", ": ")
            )
        )
    else:
        print(f"{context.settings_path}")


@settings.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def set_setting(context: Context, key: str, value: str) -> None:
    """Set KEY (in dotted notation) to VALUE, and save the settings."""
    settings = context.settings
    try:
        settings.set(key, settings.schema.parse_value(key, value))
        saved = save_settings(context.settings_path, settings)
    except SettingsError as error:
        raise click.ClickException(str(error))
    if saved:
        click.echo(f"Saved settings to {str(context.settings_path)!r}")
    else:
        click.echo(f"{key} is already {value}")


if __name__ == "__main__":
    main()
