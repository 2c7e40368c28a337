"""Extract the function around one file location."""

from __future__ import annotations

import click

from stackdigest.commands.resolve import json_mode
from stackdigest.config import load_settings
from stackdigest.exit_codes import EXIT_PARTIAL, SourceMissingError
from stackdigest.output.formatter import json_envelope, to_json
from stackdigest.source.extractor import STATUS_NO_STRUCTURAL_MATCH, STATUS_OK, extract_function_source


@click.command("extract")
@click.argument("file", type=str)
@click.argument("line", type=click.IntRange(min=1))
@click.option("--symbol", "-s", default="", help="Full or short symbol of the function (improves anchoring).")
@click.option("--max-lines", type=int, default=None, help="Crop the function to this many lines (0 = no crop).")
@click.pass_context
def extract(ctx, file, line, symbol, max_lines):
    """Show the function containing LINE of FILE.

    Without --symbol only the enclosing-block search runs.  When no
    function body can be found, nearby lines are shown and the exit code
    is 6.

    \b
      stackdigest extract Source/Net/Writer.cpp 424 -s "UE::Net::FWriter::Write(int)"
    """
    settings = load_settings()
    if max_lines is not None:
        settings.max_source_lines = max_lines

    outcome = extract_function_source(file, line, symbol, settings)
    if outcome.status not in (STATUS_OK, STATUS_NO_STRUCTURAL_MATCH):
        raise SourceMissingError(outcome.message)

    if json_mode(ctx):
        click.echo(
            to_json(
                json_envelope(
                    "extract",
                    summary={"verdict": outcome.message, "status": outcome.status, "ok": outcome.ok},
                    **outcome.to_dict(),
                )
            )
        )
    else:
        click.echo(f"{outcome.path}: {outcome.message}")
        click.echo(outcome.code)

    if not outcome.ok:
        ctx.exit(EXIT_PARTIAL)
