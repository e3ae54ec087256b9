"""Configuration management for chainload."""

from chainload.config.loader import (
    EXAMPLE_PLAN,
    ChainConfig,
    PlanConfig,
    StepConfig,
    create_example_plan,
    load_plan,
    parse_plan,
    read_plan_data,
)
from chainload.config.settings import LoadSettings, load_settings

__all__ = [
    "EXAMPLE_PLAN",
    "ChainConfig",
    "PlanConfig",
    "StepConfig",
    "create_example_plan",
    "load_plan",
    "parse_plan",
    "read_plan_data",
    "LoadSettings",
    "load_settings",
]
