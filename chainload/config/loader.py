"""Load plan files.

A plan file is a YAML (``.yml``/``.yaml``) or JSON (``.json``) document:

.. code-block:: yaml

    number_of_requests: 100
    duration_s: 10
    chains:
      - name: homepage
        proportion: 2
        steps:
          - url: https://example.com/
            delay_s: 0.01
          - url: https://example.com/static/app.js
      - name: search
        steps:
          - url: https://example.com/search?q=load

``requests`` is accepted in place of both ``chains`` and ``steps``.
Validation problems are collected and raised together as a single
``ConfigurationError``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from chainload.core.models import LoadPlan, RequestStep, WeightedChain, validate_absolute_url
from chainload.errors import ConfigurationError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yml", ".yaml"}
JSON_SUFFIXES = {".json"}


class StepConfig(BaseModel):
    """A step as written in a plan file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    url: str = Field(..., min_length=1, description="Absolute URL to GET")
    delay_s: float = Field(
        default=0.0,
        ge=0.0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("delay_s", "delay"),
        description="Seconds to wait after the fetch",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        try:
            return validate_absolute_url(v)
        except ConfigurationError as e:
            raise ValueError(e.message) from e


class ChainConfig(BaseModel):
    """A weighted chain as written in a plan file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str | None = Field(default=None, description="Group name")
    proportion: int = Field(
        default=1,
        ge=1,
        validation_alias=AliasChoices("proportion", "weight"),
        description="Relative selection weight",
    )
    steps: list[StepConfig] = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("steps", "requests"),
        description="Ordered steps",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not v.strip():
            raise ValueError("Chain name cannot be empty or whitespace")
        return v.strip()


class PlanConfig(BaseModel):
    """A complete plan file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    number_of_requests: int = Field(..., ge=0, description="Chain executions to draw")
    duration_s: float = Field(
        default=0.0,
        ge=0.0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("duration_s", "duration"),
        description="Smear window in seconds",
    )
    chains: list[ChainConfig] = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("chains", "requests"),
        description="Weighted chains",
    )

    def to_plan(self) -> LoadPlan:
        """Convert to the runtime LoadPlan."""
        chains = tuple(
            WeightedChain(
                name=chain.name or f"chain-{index}",
                proportion=chain.proportion,
                steps=tuple(RequestStep(url=step.url, delay=step.delay_s) for step in chain.steps),
            )
            for index, chain in enumerate(self.chains, start=1)
        )
        return LoadPlan(
            chains=chains,
            number_of_requests=self.number_of_requests,
            duration=self.duration_s,
        )


def _format_problems(error: ValidationError) -> list[str]:
    problems = []
    for item in error.errors():
        location = " -> ".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "Unknown error")
        problems.append(f"{location}: {message}" if location else message)
    return problems


def parse_plan(data: Any) -> LoadPlan:
    """Validate already decoded plan data.

    Args:
        data: The decoded YAML/JSON document.

    Returns:
        The validated LoadPlan.

    Raises:
        ConfigurationError: If the document does not describe a valid plan.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Plan must be a mapping at the top level, got {type(data).__name__}"
        )
    try:
        config = PlanConfig.model_validate(data)
    except ValidationError as e:
        problems = _format_problems(e)
        raise ConfigurationError(
            f"Load plan has {len(problems)} problem(s)", problems=problems, cause=e
        ) from e
    return config.to_plan()


def read_plan_data(path: str | Path) -> Any:
    """Read and decode a plan file without validating it.

    The format is chosen from the file suffix; files with another suffix are
    parsed as YAML, which also accepts JSON.

    Raises:
        ConfigurationError: If the file cannot be read or decoded.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read plan file {path}: {e}", cause=e) from e

    try:
        if path.suffix.lower() in JSON_SUFFIXES:
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot parse plan file {path}: {e}", cause=e) from e


def load_plan(path: str | Path) -> LoadPlan:
    """Load and validate a plan file.

    Args:
        path: Path to a YAML or JSON plan file.

    Returns:
        The validated LoadPlan.

    Raises:
        ConfigurationError: If the file cannot be read, decoded or validated.
    """
    plan = parse_plan(read_plan_data(path))
    logger.debug(
        f"Loaded plan {path}: {len(plan.chains)} chain(s), "
        f"{plan.number_of_requests} request(s) over {plan.duration}s"
    )
    return plan


EXAMPLE_PLAN = """\
# chainload plan
#
# number_of_requests chain executions are drawn, each picking a chain with
# probability proportion / sum(proportions) and a start time uniformly within
# the first duration_s seconds of the run.
number_of_requests: 10
duration_s: 1.0
chains:
  - name: homepage
    proportion: 1
    steps:
      - url: https://example.com/
        delay_s: 0.01
      - url: https://example.com/favicon.ico
        delay_s: 0
  - name: search
    proportion: 2
    steps:
      - url: https://example.com/?q=chainload
        delay_s: 0
"""


def create_example_plan(path: str | Path, force: bool = False) -> Path:
    """Write an example plan file.

    Args:
        path: Where to write the plan.
        force: Overwrite an existing file.

    Returns:
        The path written.

    Raises:
        FileExistsError: If the file exists and ``force`` is not set.
    """
    path = Path(path)
    if path.exists() and not force:
        raise FileExistsError(f"{path} already exists")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(EXAMPLE_PLAN, encoding="utf-8")
    return path
