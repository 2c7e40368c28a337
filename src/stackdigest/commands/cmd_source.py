"""Show the source of one frame of a call stack."""

from __future__ import annotations

import click

from stackdigest.commands.resolve import STACK_ARGUMENT, json_mode, load_stack, pick_frame
from stackdigest.config import load_settings
from stackdigest.exit_codes import EXIT_PARTIAL, SourceMissingError
from stackdigest.output.formatter import fenced, json_envelope, to_json
from stackdigest.source.extractor import STATUS_NO_STRUCTURAL_MATCH, STATUS_OK, extract_frame_source


@click.command("source")
@STACK_ARGUMENT
@click.option("--frame", "-f", "frame_index", type=int, default=0, show_default=True, help="Frame index to show.")
@click.option("--max-lines", type=int, default=None, help="Crop the function to this many lines (0 = no crop).")
@click.pass_context
def source(ctx, stack, frame_index, max_lines):
    """Extract the function behind one frame of STACK.

    Frames without an ``at <path>(<line>)`` location, or whose file is not
    available locally (see ``stackdigest config --add-remap``), exit with 4.
    """
    _, frames = load_stack(stack)
    frame = pick_frame(frames, frame_index)
    settings = load_settings()
    if max_lines is not None:
        settings.max_source_lines = max_lines

    outcome = extract_frame_source(frame, settings)
    if outcome.status not in (STATUS_OK, STATUS_NO_STRUCTURAL_MATCH):
        raise SourceMissingError(f"{frame.describe()}: {outcome.message}")

    if json_mode(ctx):
        click.echo(
            to_json(
                json_envelope(
                    "source",
                    summary={"verdict": outcome.message, "status": outcome.status, "ok": outcome.ok},
                    frame=frame.to_dict(),
                    **outcome.to_dict(),
                )
            )
        )
    else:
        click.echo(frame.describe())
        click.echo(outcome.message)
        click.echo(fenced(outcome.code, "cpp"))

    if not outcome.ok:
        ctx.exit(EXIT_PARTIAL)
