from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Literal

from termfilter.policies import MatchPolicy

from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    match: MatchPolicy = MatchPolicy.SUBSTRING


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    match: MatchPolicy | None,
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    meta = CommandMeta(
        duration_ms=duration_ms,
        match=match.value if match is not None else None,
    )
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=meta,
        error=error,
    )
