"""Shared helpers for commands that read a call stack."""

from __future__ import annotations

import click

from stackdigest.callstack.frames import CallStackFrame
from stackdigest.callstack.parser import parse_callstack, read_callstack
from stackdigest.exit_codes import NoFramesError, StackDigestError

STACK_ARGUMENT = click.argument(
    "stack",
    required=False,
    default="-",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True),
)


def json_mode(ctx) -> bool:
    return bool(ctx.obj.get("json")) if ctx.obj else False


def load_stack(stack: str) -> tuple[str, list[CallStackFrame]]:
    """Read *stack* (path or ``-``) and parse it.  Raises NoFramesError."""
    try:
        text = read_callstack(stack)
    except OSError as exc:
        raise StackDigestError(f"could not read call stack {stack}: {exc}") from exc
    frames = parse_callstack(text)
    if not frames:
        raise NoFramesError()
    return text, frames


def pick_frame(frames: list[CallStackFrame], index: int) -> CallStackFrame:
    if not 0 <= index < len(frames):
        raise click.BadParameter(
            f"frame {index} out of range (stack has {len(frames)} frame(s), 0-{len(frames) - 1})",
            param_hint="'--frame'",
        )
    return frames[index]
