"""
Engine configuration.

Settings are read from environment variables (a local .env file is loaded
first); explicit keyword arguments take precedence.

Environment variables:
- EXTRACT_QUERY_PREVIEW_LATENCY: simulated preview delay in seconds
- EXTRACT_QUERY_PREVIEW_ROWS: number of synthesized preview rows
- EXTRACT_QUERY_FIELD_WARNING_LIMIT: selected field count that triggers a warning
- EXTRACT_QUERY_STRICT_VALIDATION: run the strict rule set (true/false)
- EXTRACT_QUERY_STORE_REQUIRE_VALID: store re-validates on write (true/false)
- EXTRACT_QUERY_LOG_LEVEL: logging level
"""

import os
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "EXTRACT_QUERY_"


class EngineSettings(BaseModel):
    """Configuration for the query engine."""

    preview_latency: float = Field(default=1.0, ge=0)
    preview_rows: int = Field(default=5, ge=0)
    field_warning_limit: int = Field(default=20, ge=0)
    strict_validation: bool = False
    store_require_valid: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **overrides: Any) -> "EngineSettings":
        """
        Build settings from the environment.

        Args:
            dotenv_path: Optional .env file path (default: search upwards)
            **overrides: Explicit values that win over the environment

        Returns:
            Validated EngineSettings

        Raises:
            pydantic.ValidationError: If a value cannot be parsed
        """
        load_dotenv(dotenv_path)

        values: dict = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
