"""chainload - weighted HTTP request-chain load generator.

chainload draws a fixed number of executions from a weighted set of named
request chains, spreads their start times uniformly over a time window,
runs them all concurrently and reports latency and error statistics per
chain name.

Key Features:
    - Weighted chains: each chain is drawn in proportion to its weight
    - Time smearing: start delays are uniform over the configured window
    - Sequential steps: a chain's fetches and post-fetch delays run in order
    - Outcome classification: success, parse error, timeout, invalid status
      code, or other failure with its cause
    - Statistics: mean and population standard deviation of chain latency,
      failure counts and the most common errors per chain name

Example:
    >>> from chainload import LoadPlan, LoadRunner, RequestStep, WeightedChain
    >>> from chainload.reporters import TableReporter
    >>>
    >>> plan = LoadPlan(
    ...     chains=(
    ...         WeightedChain(
    ...             name="homepage",
    ...             steps=(
    ...                 RequestStep("https://example.com/", delay=0.01),
    ...                 RequestStep("https://example.com/app.js"),
    ...             ),
    ...         ),
    ...         WeightedChain(
    ...             name="search",
    ...             proportion=2,
    ...             steps=(RequestStep("https://example.com/?q=load"),),
    ...         ),
    ...     ),
    ...     number_of_requests=10,
    ...     duration=1.0,
    ... )
    >>> result = LoadRunner().run(plan)
    >>> print(TableReporter().generate(result))
"""

__version__ = "0.1.0"

from chainload.core.models import (  # noqa: E402
    ChainResult,
    GroupedResults,
    GroupStatistics,
    LoadPlan,
    OutcomeKind,
    RequestStep,
    StepOutcome,
    WeightedChain,
)
from chainload.errors import ChainloadError, ConfigurationError  # noqa: E402
from chainload.runner import LoadRunner, LoadRunResult, Scheduler  # noqa: E402
from chainload.stats import aggregate  # noqa: E402

__all__ = [
    "__version__",
    "ChainResult",
    "GroupedResults",
    "GroupStatistics",
    "LoadPlan",
    "OutcomeKind",
    "RequestStep",
    "StepOutcome",
    "WeightedChain",
    "ChainloadError",
    "ConfigurationError",
    "LoadRunner",
    "LoadRunResult",
    "Scheduler",
    "aggregate",
]
