"""
Engine Settings
===============

Runtime configuration for PathEngine.

Settings are a frozen pydantic model. They can be built directly or
read from the environment (optionally seeded from a ``.env`` file):

- GRAPHROUTE_VERBOSE: print progress lines ("1", "true", "yes", "on")
- GRAPHROUTE_DUPLICATE_IDS: "last_write_wins" or "reject"
"""

import os
from pathlib import Path
from typing import Literal, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator


ENV_PREFIX = "GRAPHROUTE_"

DuplicatePolicy = Literal["last_write_wins", "reject"]


class EngineSettings(BaseModel):
    """Behavioural switches for PathEngine."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    verbose: bool = True
    """Print [PathEngine] progress lines on initialize."""

    duplicate_ids: DuplicatePolicy = "last_write_wins"
    """
    How initialize() treats repeated vertex or edge ids:
    - last_write_wins: the later record replaces the earlier one
    - reject: raise InvalidInputError naming the duplicate id
    """

    @field_validator("verbose", mode="before")
    @classmethod
    def _parse_flag(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return value

    @field_validator("duplicate_ids", mode="before")
    @classmethod
    def _normalize_policy(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None) -> "EngineSettings":
        """
        Build settings from GRAPHROUTE_* environment variables.

        Parameters
        ----------
        env_file : str or Path, optional
            A dotenv file to load first. Variables already present in the
            process environment win over the file.

        Raises
        ------
        pydantic.ValidationError
            If a variable holds an unsupported value
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)
        else:
            load_dotenv(override=False)

        values = {}
        for field_name in cls.model_fields:
            raw = os.environ.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is not None:
                values[field_name] = raw
        return cls(**values)
