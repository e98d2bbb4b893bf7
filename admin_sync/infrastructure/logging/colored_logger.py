"""Colored sync logger — stage-tagged console lines for refreshes and mutations.

Refreshes, optimistic edits and reverts of several screens interleave on one
event loop. Every line carries a colored stage tag, and the logger name
(``SyncCore.<resource key>``) tells the screens apart.

    🔄 REFRESH    blue     fetch from the backend
    💾 FALLBACK   yellow   saved snapshot shown instead of live data
    ✏️ MUTATE     magenta  optimistic create/update/delete
    🔗 RECONCILE  green    server result replaced the optimistic one
    ↩️ REVERT     red      optimistic change undone
    ⏱️ SCHEDULER  cyan     activation and periodic timer
"""

import asyncio
import logging
import time
from contextlib import contextmanager
from typing import Any, NamedTuple

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_GRAY = "\033[90m"
_RED = "\033[91m"
_GREEN = "\033[92m"
_YELLOW = "\033[93m"


class Stage(NamedTuple):
    label: str
    color: str
    icon: str


class SyncStage:
    """Stages of the synchronization core."""

    REFRESH = Stage("REFRESH", "\033[94m", "🔄")
    FALLBACK = Stage("FALLBACK", _YELLOW, "💾")
    MUTATION = Stage("MUTATE", "\033[95m", "✏️")
    RECONCILE = Stage("RECONCILE", _GREEN, "🔗")
    REVERT = Stage("REVERT", _RED, "↩️")
    SCHEDULER = Stage("SCHEDULER", "\033[96m", "⏱️")


def _details(kwargs: dict[str, Any]) -> str:
    if not kwargs:
        return ""
    return f" {_GRAY}({' | '.join(f'{k}={v}' for k, v in kwargs.items())}){_RESET}"


class SyncLogger:
    """Stage-tagged logger for one screen's sync core.

    Usage:
        log = SyncLogger("SyncCore.roles")
        with log.timed_step(SyncStage.REFRESH, "Fetching roles", seq=3):
            records = await client.list()
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def _emit(
        self,
        level: int,
        stage: Stage,
        text: str,
        *,
        tag_color: str | None = None,
        bold: bool = False,
        **kwargs: Any,
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        color = tag_color or stage.color
        weight = _BOLD if bold else ""
        self._logger.log(
            level,
            f"{color}{weight}{stage.icon} [{stage.label}]{_RESET} {text}{_details(kwargs)}",
        )

    def step_start(self, stage: Stage, message: str, **kwargs: Any) -> None:
        self._emit(logging.DEBUG, stage, f"{stage.color}{message}{_RESET}", bold=True, **kwargs)

    def step_complete(self, stage: Stage, message: str, **kwargs: Any) -> None:
        self._emit(logging.INFO, stage, f"{_GREEN}✓ {message}{_RESET}", **kwargs)

    def step_warning(self, stage: Stage, message: str, **kwargs: Any) -> None:
        self._emit(
            logging.WARNING, stage, f"{_YELLOW}{message}{_RESET}",
            tag_color=_YELLOW, bold=True, **kwargs,
        )

    def step_error(self, stage: Stage, message: str, error: BaseException | None = None) -> None:
        text = f"{_RED}{message}{_RESET}"
        if error is not None:
            text += f" {_DIM}→ {type(error).__name__}: {error}{_RESET}"
        self._emit(logging.ERROR, stage, text, tag_color=_RED, bold=True)

    def detail(self, message: str, **kwargs: Any) -> None:
        """Dimmed follow-up line (debug level)."""
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(f"   {_GRAY}└ {message}{_RESET}{_details(kwargs)}")

    @contextmanager
    def timed_step(self, stage: Stage, message: str, **kwargs: Any):
        """Log start, then success, failure or cancellation with the elapsed time.

        Exceptions are logged and re-raised unchanged.
        """
        self.step_start(stage, message, **kwargs)
        started = time.perf_counter()
        try:
            yield
        except asyncio.CancelledError:
            self.detail(f"{message} cancelled after {time.perf_counter() - started:.2f}s")
            raise
        except Exception as exc:
            self.step_error(
                stage, f"{message} failed after {time.perf_counter() - started:.2f}s", error=exc
            )
            raise
        self.step_complete(stage, f"{message} ({time.perf_counter() - started:.2f}s)", **kwargs)
