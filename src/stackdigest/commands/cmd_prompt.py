"""Build an LLM prompt from a call stack."""

from __future__ import annotations

import click

from stackdigest.commands.resolve import STACK_ARGUMENT, json_mode, load_stack
from stackdigest.config import load_settings
from stackdigest.output.formatter import json_envelope, to_json
from stackdigest.prompt.builder import assemble_prompt
from stackdigest.prompt.templates import MODE_EXPLAIN, MODES, TemplateStore


@click.command("prompt")
@STACK_ARGUMENT
@click.option("--mode", "-m", type=click.Choice(MODES, case_sensitive=False), default=MODE_EXPLAIN, show_default=True)
@click.option("--frames", "-n", "frame_count", type=click.IntRange(min=0), default=None,
              help="Annotate the top N frames (default: config frames_to_annotate).")
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=4, show_default=True,
              help="Frames extracted in parallel.")
@click.option("--template-file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Use this template text instead of the stored one for --mode.")
@click.pass_context
def prompt(ctx, stack, mode, frame_count, jobs, template_file):
    """Assemble a prompt: template, the raw call stack, and frame sources.

    Sources are extracted for the top frames; frames whose function could
    not be found contribute nearby lines, frames without a file a
    placeholder.

    \b
      stackdigest prompt crash.txt --mode optimize --frames 5 > prompt.md
    """
    raw, frames = load_stack(stack)
    settings = load_settings()

    if template_file:
        with open(template_file, "r", encoding="utf-8") as f:
            template = f.read()
    else:
        template = TemplateStore().get(mode)

    text, collected = assemble_prompt(template, raw, frames, settings, frame_count, jobs)

    if json_mode(ctx):
        found = sum(1 for _, o in collected if o.ok)
        click.echo(
            to_json(
                json_envelope(
                    "prompt",
                    summary={
                        "verdict": f"{found}/{len(collected)} frame source(s) located",
                        "mode": mode.lower(),
                        "frames_total": len(frames),
                        "frames_annotated": len(collected),
                        "sources_found": found,
                    },
                    prompt=text,
                    frames=[
                        {**f.to_dict(), "status": o.status, "message": o.message}
                        for f, o in collected
                    ],
                )
            )
        )
        return

    click.echo(text, nl=False)
