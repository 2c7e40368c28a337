"""List the frames parsed from a call stack."""

from __future__ import annotations

import click

from stackdigest.commands.resolve import STACK_ARGUMENT, json_mode, load_stack
from stackdigest.output.formatter import json_envelope, section, to_json


@click.command("frames")
@STACK_ARGUMENT
@click.pass_context
def frames(ctx, stack):
    """Parse a call stack and list its frames.

    STACK is a file holding text copied from a debugger's call-stack
    window, or ``-`` (the default) to read it from stdin.

    \b
      stackdigest frames crash.txt
      pbpaste | stackdigest frames
    """
    _, parsed = load_stack(stack)
    located = sum(1 for f in parsed if f.has_location)

    if json_mode(ctx):
        click.echo(
            to_json(
                json_envelope(
                    "frames",
                    summary={
                        "verdict": f"{len(parsed)} frame(s), {located} with source location",
                        "frames": len(parsed),
                        "with_location": located,
                    },
                    frames=[f.to_dict() for f in parsed],
                )
            )
        )
        return

    click.echo(section(f"{len(parsed)} frame(s), {located} with source location:", [f.describe() for f in parsed]))
