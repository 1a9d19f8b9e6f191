"""Structlog setup and per-analysis log context.

Events emitted while an analysis runs carry the coin and the pipeline stage
they came from. Both are bound through contextvars, so concurrent analyses
on one event loop keep their fields apart.
"""
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from structlog.typing import FilteringBoundLogger, Processor

ANALYSIS_STAGES = ("history", "indicators", "sentiment", "narrative", "strategy")


def _level_number(log_level: str) -> int:
    return logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO)


def configure_structured_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Route pipeline events through structlog.

    JSON lines go to stdout for log shippers; ``json_output=False`` renders
    key=value lines for local runs instead.

    Args:
        log_level: Minimum level name; unknown names fall back to INFO
        json_output: Render JSON (True) or console text (False)
    """
    level = _level_number(log_level)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=False,
    )


@contextmanager
def analysis_context(symbol: str) -> Iterator[None]:
    """Bind the coin to every event logged inside the block.

    The stage starts at "history" and moves forward with `enter_stage`.
    Both keys are removed again on exit.
    """
    with structlog.contextvars.bound_contextvars(symbol=symbol, stage=ANALYSIS_STAGES[0]):
        yield


def enter_stage(stage: str) -> None:
    if stage not in ANALYSIS_STAGES:
        raise ValueError(f"Unknown analysis stage: {stage}")
    structlog.contextvars.bind_contextvars(stage=stage)


def get_logger(name: str) -> FilteringBoundLogger:
    return structlog.get_logger(name)
