from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import click

from .context import CLIContext, build_result
from .errors import error_info_for_exception, exit_code_for_exception, normalize_exception
from .render import RenderSettings, render_result
from .results import CommandResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutput:
    data: Any | None = None


def emit_result(ctx: CLIContext, result: CommandResult) -> None:
    render_result(
        result,
        settings=RenderSettings(output=ctx.output, quiet=ctx.quiet),
    )


CommandFn = Callable[[CLIContext, list[str]], CommandOutput]


def run_command(ctx: CLIContext, *, command: str, fn: CommandFn) -> None:
    started = time.time()
    warnings: list[str] = []
    try:
        out = fn(ctx, warnings)
        result = build_result(
            ok=True,
            command=command,
            started_at=started,
            data=out.data,
            warnings=warnings,
            match=ctx.match,
        )
        emit_result(ctx, result)
        raise click.exceptions.Exit(0)
    except click.exceptions.Exit:
        raise
    except Exception as exc:
        normalized = normalize_exception(exc)
        code = exit_code_for_exception(normalized)
        logger.debug("Command %s failed", command, exc_info=exc)
        result = build_result(
            ok=False,
            command=command,
            started_at=started,
            data=None,
            warnings=warnings,
            match=ctx.match,
            error=error_info_for_exception(normalized),
        )
        emit_result(ctx, result)
        raise click.exceptions.Exit(code) from exc
