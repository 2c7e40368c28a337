"""Show, replace or reset a stored prompt template."""

from __future__ import annotations

import click

from stackdigest.commands.resolve import json_mode
from stackdigest.output.formatter import json_envelope, to_json
from stackdigest.prompt.templates import MODES, TemplateStore


@click.command("template")
@click.argument("mode", type=click.Choice(MODES, case_sensitive=False))
@click.option("--show", "action", flag_value="show", default=True, help="Print the template (default).")
@click.option("--set-file", type=click.File("r", encoding="utf-8"), default=None,
              help="Replace the template with the contents of this file ('-' for stdin).")
@click.option("--reset", "action", flag_value="reset", help="Restore the built-in default.")
@click.pass_context
def template(ctx, mode, action, set_file):
    """Manage the prompt template for MODE (empty, explain, optimize).

    Templates are stored in ``templates.json`` next to ``config.json``.
    Setting an empty template restores the default.
    """
    mode = mode.lower()
    store = TemplateStore()

    if set_file is not None:
        store.set(mode, set_file.read())
        verdict = "saved"
    elif action == "reset":
        store.reset(mode)
        verdict = "reset"
    else:
        verdict = "shown"

    text = store.get(mode)
    if json_mode(ctx):
        click.echo(
            to_json(
                json_envelope(
                    "template",
                    summary={"verdict": verdict, "mode": mode, "is_default": store.is_default(mode)},
                    mode=mode,
                    template=text,
                    path=str(store.path),
                )
            )
        )
        return

    if verdict != "shown":
        click.echo(f"Template '{mode}' {verdict} ({store.path})")
        return
    click.echo(text)
