"""Engine configuration for tinytl.

Schema (all keys optional):
- max_depth: maximum nesting depth of evaluated nodes
- join_scalar: how #join treats a collection that is not a list
  - singleton: render the body once with the iterator bound to the value
  - verbatim: output a scalar as is, without rendering the body
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

DEFAULT_MAX_DEPTH = 64


class EngineConfig(BaseModel):
    """Settings shared by the evaluator and the Template facade."""

    model_config = {"frozen": True, "extra": "forbid"}

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        description="Maximum nesting depth of evaluated nodes",
    )
    join_scalar: Literal["singleton", "verbatim"] = Field(
        default="singleton",
        description="How #join renders a collection that is not a list",
    )


def load_config(path: Path) -> EngineConfig:
    """Load engine settings from a YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must be a mapping at the top level: {path}")

    return EngineConfig(**data)
