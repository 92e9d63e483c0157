"""
Sampling parameter DTO with bounds validation.

``max_tokens`` is mandatory: there is no default inferred from the model's
context length, because a silent default truncates responses.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SamplingParams(BaseModel):
    """Generation controls forwarded to the vendor.

    Attributes:
        max_tokens: Completion budget (> 0). Required.
        temperature: Optional temperature within [0.0, 1.0].
        top_p: Optional nucleus threshold within [0.0, 1.0].
        top_k: Optional top-k cutoff (>= 1).
        stop_sequences: Optional non-empty custom stop strings.
    """

    model_config = ConfigDict(frozen=True)

    max_tokens: int = Field(..., gt=0)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    top_k: Optional[int] = Field(default=None, ge=1)
    stop_sequences: Optional[List[str]] = None

    @field_validator("stop_sequences")
    @classmethod
    def _non_empty_stops(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is not None and any(not s for s in value):
            raise ValueError("stop_sequences must not contain empty strings")
        return value


__all__ = ["SamplingParams"]
