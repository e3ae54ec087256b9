"""Chain execution, scheduling and load-run orchestration."""

from chainload.runner.chain import ChainRunner, SleepFunc
from chainload.runner.engine import LoadRunner, LoadRunResult, default_fetcher_factory
from chainload.runner.scheduler import (
    ProgressCallback,
    ScheduledChain,
    Scheduler,
    draw_schedule,
    expand_population,
)

__all__ = [
    "ChainRunner",
    "SleepFunc",
    "LoadRunner",
    "LoadRunResult",
    "default_fetcher_factory",
    "ProgressCallback",
    "ScheduledChain",
    "Scheduler",
    "draw_schedule",
    "expand_population",
]
