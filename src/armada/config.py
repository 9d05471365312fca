"""Game rule settings."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field

BOARD_SIZE = 10
FLEET_SIZE = 10
SHOTS_PER_BURST = 3

_RULES_ENV = {
    "board_size": "ARMADA_BOARD_SIZE",
    "fleet_size": "ARMADA_FLEET_SIZE",
    "shots_per_burst": "ARMADA_SHOTS_PER_BURST",
}


class RulesConfig(BaseModel):
    """Board dimension, fleet capacity and shots fired per burst."""

    board_size: int = Field(default=BOARD_SIZE, gt=0)
    fleet_size: int = Field(default=FLEET_SIZE, gt=0)
    shots_per_burst: int = Field(default=SHOTS_PER_BURST, gt=0)

    @classmethod
    def from_env(cls, **overrides: Any) -> "RulesConfig":
        """Read `ARMADA_*` rule settings; pydantic validates the raw strings."""
        data: dict[str, Any] = {}
        for field_name, env_name in _RULES_ENV.items():
            value = os.getenv(env_name)
            if value is not None:
                data[field_name] = value.strip()
        data.update(overrides)
        return cls(**data)
