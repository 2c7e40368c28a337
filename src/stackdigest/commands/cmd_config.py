"""Manage stackdigest settings (.stackdigest/config.json)."""

from __future__ import annotations

import click

from stackdigest.commands.resolve import json_mode
from stackdigest.config import (
    CONFIG_FILE_NAME,
    get_config_dir,
    load_config,
    load_settings,
    parse_remap,
    write_config,
)
from stackdigest.output.formatter import format_table, json_envelope, section, to_json


def _parse_remap_option(ctx, param, values):
    try:
        return [parse_remap(v) for v in values]
    except ValueError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


@click.command("config")
@click.option("--show", is_flag=True, help="Print the effective settings.")
@click.option("--set-frames", type=click.IntRange(min=0), default=None,
              help="Frames annotated from the top of the stack.")
@click.option("--set-max-lines", type=click.IntRange(min=1), default=None,
              help="Maximum lines shown per function.")
@click.option("--set-marker", default=None, help="Token marking the frame's current line.")
@click.option("--set-near-miss", type=click.IntRange(min=0), default=None,
              help="Accept a function body that misses the line when its name is this many characters away.")
@click.option("--add-remap", "remaps", multiple=True, callback=_parse_remap_option, metavar="FROM=TO",
              help="Rewrite source paths starting with FROM to start with TO (repeatable).")
@click.option("--clear-remaps", is_flag=True, help="Remove all path remaps.")
@click.pass_context
def config(ctx, show, set_frames, set_max_lines, set_marker, set_near_miss, remaps, clear_remaps):
    """Manage stackdigest settings (.stackdigest/config.json).

    The config directory is ``.stackdigest`` at the git root (or the current
    directory); ``STACKDIGEST_CONFIG_DIR`` overrides it.  Environment
    variables ``STACKDIGEST_FRAMES``, ``STACKDIGEST_MAX_LINES`` and
    ``STACKDIGEST_NEAR_MISS_CHARS`` win over the file.

    Map build-machine paths onto a local checkout:

    \b
      stackdigest config --add-remap "C:\\\\UnrealEngine2\\\\=D:/UE5/"
    """
    config_dir = get_config_dir()
    current = load_config(config_dir)

    updates: dict = {}
    if set_frames is not None:
        updates["frames_to_annotate"] = set_frames
    if set_max_lines is not None:
        updates["max_source_lines"] = set_max_lines
    if set_marker is not None:
        if not set_marker.strip():
            raise click.BadParameter("marker must not be blank", param_hint="'--set-marker'")
        updates["current_line_marker"] = set_marker.strip()
    if set_near_miss is not None:
        updates["near_miss_chars"] = set_near_miss
    if clear_remaps or remaps:
        existing = [] if clear_remaps else current.get("path_remaps", [])
        if not isinstance(existing, list):
            existing = []
        updates["path_remaps"] = existing + [r for r in remaps if r not in existing]

    if updates:
        config_path = write_config(updates, config_dir)
        if json_mode(ctx):
            click.echo(
                to_json(
                    json_envelope(
                        "config",
                        summary={"verdict": "saved", "keys": sorted(updates)},
                        config_path=str(config_path),
                        **updates,
                    )
                )
            )
            return
        click.echo("Saved settings:")
        for k, v in updates.items():
            click.echo(f"  {k} = {v!r}")
        click.echo(f"Config written to {config_path}")
        if not show:
            return

    settings = load_settings(config_dir)
    data = settings.to_dict()
    if json_mode(ctx):
        click.echo(
            to_json(
                json_envelope(
                    "config",
                    summary={"verdict": "current", "exists": (config_dir / CONFIG_FILE_NAME).exists()},
                    config_path=str(config_dir / CONFIG_FILE_NAME),
                    settings=data,
                )
            )
        )
        return

    rows = [[k, repr(v)] for k, v in data.items() if k != "path_remaps"]
    click.echo(f"Config: {config_dir / CONFIG_FILE_NAME}")
    click.echo(format_table(["setting", "value"], rows))
    remap_lines = [f"  {r['from']} -> {r['to']}" for r in settings.path_remaps] or ["  (none)"]
    click.echo(section("Path remaps:", remap_lines))
