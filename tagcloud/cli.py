from __future__ import annotations

import logging
from typing import Any

import typer

from . import __version__
from .commands import config_cmd, export_cmd, load_config_or_exit, render_cmd, tags_cmd

app = typer.Typer(help="tagcloud: weighted tag clouds from text")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _overrides(
    *,
    max_tags: int | None,
    min_weight: float | None,
    max_weight: float | None,
    threshold: float | None,
    case: str | None,
    locale: str | None,
    link: str | None,
    blacklist: str | None,
    blacklist_locale: str | None,
    min_length: int | None,
    max_length: int | None,
) -> dict[str, Any]:
    return {
        "max_tags_to_display": max_tags,
        "min_weight": min_weight,
        "max_weight": max_weight,
        "threshold": threshold,
        "tag_case": case,
        "locale": locale,
        "default_link": link,
        "blacklist_file": blacklist,
        "blacklist_locale": blacklist_locale,
        "min_length": min_length,
        "max_length": max_length,
    }


@app.command()
def render(
    paths: list[str] = typer.Argument(None, help="Text files to read ('-' for stdin)"),
    cloud_path: str = typer.Option(None, "--cloud", help="Start from an exported cloud"),
    config: str = typer.Option(None, help="Path to config JSON"),
    max_tags: int = typer.Option(None, help="Maximum tags to display (negative: unlimited)"),
    min_weight: float = typer.Option(None, help="Weight of the weakest tag"),
    max_weight: float = typer.Option(None, help="Weight of the strongest tag"),
    threshold: float = typer.Option(None, help="Hide tags scoring at or below this"),
    case: str = typer.Option(None, help="lower, upper, capitalize, preserve, case_sensitive"),
    locale: str = typer.Option(None, help="Locale used for case folding"),
    link: str = typer.Option(None, help="Link template, '{}' is replaced by the tag"),
    blacklist: str = typer.Option(None, help="File with one ignored word per line"),
    blacklist_locale: str = typer.Option(None, help="Use the bundled word list for a locale"),
    min_length: int = typer.Option(None, help="Ignore shorter words"),
    max_length: int = typer.Option(None, help="Ignore longer words"),
    plain: bool = typer.Option(False, help="Print names separated by spaces"),
    weights: bool = typer.Option(False, help="Append integer weights in plain mode"),
) -> None:
    """Render a tag cloud from text."""

    overrides = _overrides(
        max_tags=max_tags,
        min_weight=min_weight,
        max_weight=max_weight,
        threshold=threshold,
        case=case,
        locale=locale,
        link=link,
        blacklist=blacklist,
        blacklist_locale=blacklist_locale,
        min_length=min_length,
        max_length=max_length,
    )
    cfg = load_config_or_exit(config, overrides)
    render_cmd(
        cfg=cfg,
        paths=paths or [],
        cloud_path=cloud_path,
        overrides=overrides,
        plain=plain,
        show_weights=weights,
    )


@app.command()
def tags(
    paths: list[str] = typer.Argument(None, help="Text files to read ('-' for stdin)"),
    cloud_path: str = typer.Option(None, "--cloud", help="Start from an exported cloud"),
    config: str = typer.Option(None, help="Path to config JSON"),
    max_tags: int = typer.Option(None, help="Maximum tags to display (negative: unlimited)"),
    min_weight: float = typer.Option(None, help="Weight of the weakest tag"),
    max_weight: float = typer.Option(None, help="Weight of the strongest tag"),
    threshold: float = typer.Option(None, help="Hide tags scoring at or below this"),
    case: str = typer.Option(None, help="lower, upper, capitalize, preserve, case_sensitive"),
    locale: str = typer.Option(None, help="Locale used for case folding"),
    link: str = typer.Option(None, help="Link template, '{}' is replaced by the tag"),
    blacklist: str = typer.Option(None, help="File with one ignored word per line"),
    blacklist_locale: str = typer.Option(None, help="Use the bundled word list for a locale"),
    min_length: int = typer.Option(None, help="Ignore shorter words"),
    max_length: int = typer.Option(None, help="Ignore longer words"),
    sort: str = typer.Option("name", help="Sort by name or score"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List displayed tags with their scores and weights."""

    overrides = _overrides(
        max_tags=max_tags,
        min_weight=min_weight,
        max_weight=max_weight,
        threshold=threshold,
        case=case,
        locale=locale,
        link=link,
        blacklist=blacklist,
        blacklist_locale=blacklist_locale,
        min_length=min_length,
        max_length=max_length,
    )
    cfg = load_config_or_exit(config, overrides)
    tags_cmd(
        cfg=cfg,
        paths=paths or [],
        cloud_path=cloud_path,
        overrides=overrides,
        sort=sort,
        as_json=json_output,
    )


@app.command()
def export(
    paths: list[str] = typer.Argument(None, help="Text files to read ('-' for stdin)"),
    cloud_path: str = typer.Option(None, "--cloud", help="Start from an exported cloud"),
    config: str = typer.Option(None, help="Path to config JSON"),
    output: str = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout"),
    case: str = typer.Option(None, help="lower, upper, capitalize, preserve, case_sensitive"),
    locale: str = typer.Option(None, help="Locale used for case folding"),
    link: str = typer.Option(None, help="Link template, '{}' is replaced by the tag"),
    blacklist: str = typer.Option(None, help="File with one ignored word per line"),
    blacklist_locale: str = typer.Option(None, help="Use the bundled word list for a locale"),
) -> None:
    """Export the cloud, configuration and filters as JSON."""

    overrides = {
        "tag_case": case,
        "locale": locale,
        "default_link": link,
        "blacklist_file": blacklist,
        "blacklist_locale": blacklist_locale,
    }
    cfg = load_config_or_exit(config, overrides)
    export_cmd(
        cfg=cfg,
        paths=paths or [],
        cloud_path=cloud_path,
        overrides=overrides,
        output=output,
    )


@app.command("config")
def show_config(
    config: str = typer.Option(None, help="Path to config JSON"),
) -> None:
    """Show the effective configuration (file plus environment)."""

    config_cmd(cfg=load_config_or_exit(config, {}))


if __name__ == "__main__":
    app()
