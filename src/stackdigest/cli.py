"""Click CLI entry point with lazy-loaded subcommands."""

import logging
import os
import sys

# Fix Unicode output on Windows consoles (cp1253, cp1252, etc.)
if sys.platform == "win32" and not os.environ.get("PYTHONIOENCODING"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

import click

from stackdigest.exit_codes import DESCRIPTIONS

# Lazy-loading command group: imports command modules only when invoked.
_COMMANDS = {
    "frames":   ("stackdigest.commands.cmd_frames",   "frames"),
    "extract":  ("stackdigest.commands.cmd_extract",  "extract"),
    "source":   ("stackdigest.commands.cmd_source",   "source"),
    "prompt":   ("stackdigest.commands.cmd_prompt",   "prompt"),
    "template": ("stackdigest.commands.cmd_template", "template"),
    "config":   ("stackdigest.commands.cmd_config",   "config"),
}

# Command categories for organized --help display
_CATEGORIES = {
    "Call Stacks": ["frames", "source", "prompt"],
    "Source Files": ["extract"],
    "Settings": ["template", "config"],
}


class LazyGroup(click.Group):
    """A Click group that lazy-loads command modules on first access."""

    def list_commands(self, ctx):
        return sorted(_COMMANDS.keys())

    def get_command(self, ctx, cmd_name):
        if cmd_name not in _COMMANDS:
            return None
        module_path, attr_name = _COMMANDS[cmd_name]
        import importlib
        mod = importlib.import_module(module_path)
        return getattr(mod, attr_name)

    def format_help(self, ctx, formatter):
        """Categorized help display instead of flat alphabetical list."""
        self.format_usage(ctx, formatter)
        formatter.write("\n")
        if self.help:
            formatter.write(self.help + "\n\n")

        self.format_options(ctx, formatter)
        formatter.write("\n")

        shown = set()
        for cat_name, cmds in _CATEGORIES.items():
            valid_cmds = [c for c in cmds if c in _COMMANDS and c not in shown]
            if not valid_cmds:
                continue
            formatter.write(f"  {cat_name}:\n")
            for cmd_name in valid_cmds:
                cmd = self.get_command(ctx, cmd_name)
                if cmd is None:
                    continue
                help_text = cmd.get_short_help_str(limit=60)
                formatter.write(f"    {cmd_name:12s} {help_text}\n")
                shown.add(cmd_name)
            formatter.write("\n")

        formatter.write("  Exit codes:\n")
        for code, text in DESCRIPTIONS.items():
            formatter.write(f"    {code}  {text}\n")
        formatter.write("\n")

        formatter.write("  Run `stackdigest <command> --help` for details on any command.\n")


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("stackdigest")
    if not verbose:
        return
    # replace rather than stack handlers when invoked repeatedly in-process
    for old in [h for h in logger.handlers if getattr(h, "_stackdigest", False)]:
        logger.removeHandler(old)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    handler._stackdigest = True
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


@click.group(cls=LazyGroup)
@click.version_option(package_name="stackdigest")
@click.option("--json", "json_mode", is_flag=True, help="Output in JSON format")
@click.option("-v", "--verbose", is_flag=True, help="Log extraction details to stderr")
@click.pass_context
def cli(ctx, json_mode, verbose):
    """stackdigest: call stacks in, function sources and LLM prompts out."""
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_mode
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)
