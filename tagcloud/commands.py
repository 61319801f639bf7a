from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import typer
from rich import print
from rich.console import Console

from .cloud import Cloud
from .config import CloudConfig, apply_overrides, load_config, read_config_file
from .dictionary import DictionaryFilter
from .filters import Filter, LengthFilter, MaxLengthFilter, MinLengthFilter
from .render import render_plain, render_rich, weight_table
from .serialize import cloud_to_dict, dumps, loads
from .tag import by_name, by_score_desc

logger = logging.getLogger(__name__)

SORT_KEYS = {"name": by_name, "score": by_score_desc}

# Overrides that map straight onto a loaded cloud's attributes.
_CLOUD_FIELDS = (
    "max_tags_to_display",
    "min_weight",
    "max_weight",
    "threshold",
    "tag_case",
    "locale",
    "default_link",
)
_FILTER_FIELDS = ("blacklist_file", "blacklist_locale", "min_length", "max_length")


def load_config_or_exit(config_path: str | None, overrides: dict[str, Any]) -> CloudConfig:
    path = Path(config_path) if config_path else None
    try:
        read_config_file(path)
    except ValueError as exc:
        print(f"[red]Invalid config file: {exc}[/red]")
        raise typer.Exit(code=1) from exc
    return apply_overrides(load_config(path), overrides)


def build_input_filters(cfg: CloudConfig) -> list[Filter]:
    filters: list[Filter] = []
    if cfg.blacklist_file:
        filters.append(DictionaryFilter.from_lines(Path(cfg.blacklist_file).expanduser()))
    elif cfg.blacklist_locale:
        filters.append(DictionaryFilter.from_bundle(cfg.blacklist_locale))
    if cfg.min_length is not None and cfg.max_length is not None:
        filters.append(LengthFilter(cfg.min_length, cfg.max_length))
    elif cfg.min_length is not None:
        filters.append(MinLengthFilter(cfg.min_length))
    elif cfg.max_length is not None:
        filters.append(MaxLengthFilter(cfg.max_length))
    return filters


def read_sources(paths: list[str]) -> list[str]:
    texts: list[str] = []
    for raw in paths:
        if raw == "-":
            texts.append(sys.stdin.read())
            continue
        texts.append(Path(raw).expanduser().read_text(encoding="utf-8"))
    return texts


def apply_to_cloud(cloud: Cloud, cfg: CloudConfig, overrides: dict[str, Any]) -> None:
    """Copy the explicitly given ``overrides`` (resolved in ``cfg``) onto a loaded cloud.

    Filter options add input filters built from those options alone. Stored tags
    keep their keys, so a new case policy only changes how names are shown.
    """

    given = {key for key, value in overrides.items() if value is not None}
    for key in _CLOUD_FIELDS:
        if key in given:
            setattr(cloud, key, getattr(cfg, key))
    filter_overrides = {key: overrides[key] for key in _FILTER_FIELDS if key in given}
    if filter_overrides:
        for flt in build_input_filters(apply_overrides(CloudConfig(), filter_overrides)):
            cloud.add_input_filter(flt)


def build_cloud(
    cfg: CloudConfig,
    paths: list[str],
    cloud_path: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> Cloud:
    """Start from a saved snapshot (or an empty cloud) and feed it the given texts."""

    try:
        if cloud_path:
            cloud = loads(Path(cloud_path).expanduser().read_text(encoding="utf-8"))
            apply_to_cloud(cloud, cfg, overrides or {})
        else:
            cloud = Cloud.from_config(cfg, input_filters=build_input_filters(cfg))
        for text in read_sources(paths):
            cloud.add_text(text)
    except (OSError, ValueError) as exc:
        print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    logger.debug("cloud holds %d tags", cloud.size())
    return cloud


def render_cmd(
    *,
    cfg: CloudConfig,
    paths: list[str],
    cloud_path: str | None,
    overrides: dict[str, Any] | None = None,
    plain: bool,
    show_weights: bool,
) -> None:
    """Print the cloud, strongest tags styled loudest."""

    cloud = build_cloud(cfg, paths, cloud_path, overrides)
    tags = cloud.tags()
    if not tags:
        print("[yellow]No tags to display[/yellow]")
        return
    if plain:
        typer.echo(render_plain(tags, cloud.rounding, show_weights=show_weights))
        return
    Console().print(render_rich(tags, cloud.rounding, max_weight=cloud.max_weight))


def tags_cmd(
    *,
    cfg: CloudConfig,
    paths: list[str],
    cloud_path: str | None,
    overrides: dict[str, Any] | None = None,
    sort: str,
    as_json: bool,
) -> None:
    key = SORT_KEYS.get(sort)
    if key is None:
        print(f"[red]Unknown sort order: {sort} (use {', '.join(SORT_KEYS)})[/red]")
        raise typer.Exit(code=1)
    cloud = build_cloud(cfg, paths, cloud_path, overrides)
    tags = cloud.tags(key)
    if as_json:
        payload = [
            {
                "name": tag.name,
                "link": tag.link,
                "score": tag.score,
                "weight": tag.weight,
                "weight_int": tag.weight_as_int(cloud.rounding),
            }
            for tag in tags
        ]
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    Console().print(weight_table(tags, cloud.rounding))


def export_cmd(
    *,
    cfg: CloudConfig,
    paths: list[str],
    cloud_path: str | None,
    overrides: dict[str, Any] | None = None,
    output: str | None,
) -> None:
    """Write the cloud snapshot as JSON to ``output`` or stdout."""

    cloud = build_cloud(cfg, paths, cloud_path, overrides)
    if not output:
        typer.echo(dumps(cloud, indent=2))
        return
    out_path = Path(output).expanduser()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(cloud_to_dict(cloud), ensure_ascii=False, indent=2) + "\n")
    print(f"[green]Exported {cloud.size()} tags to {out_path}[/green]")


def config_cmd(*, cfg: CloudConfig) -> None:
    typer.echo(json.dumps(cfg.to_dict(), ensure_ascii=False, indent=2))
