"""Argument types shared by the tool schemas."""
from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

HttpURL = Annotated[
    str,
    Field(
        pattern=r"(?i)^https?://[^\s/?#]+[^\s]*$",
        description="Full URL (must start with http:// or https://)",
    ),
]

TimePeriod = Literal[
    "last_hour", "last_day", "last_week", "last_month", "last_year"
]

ExtractMode = Literal["text", "markdown", "structured"]
