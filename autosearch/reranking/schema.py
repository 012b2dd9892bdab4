"""Response schema for the re-ranking LLM call."""

import json
import math
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from autosearch.matching.exceptions import LLMFailure
from autosearch.matching.scoring import round_half_up


class RerankResult(BaseModel):
    """One scored job in the LLM response."""

    job_id: str = Field(..., min_length=1, description="Job identity from the request")
    llm_score: int = Field(..., ge=0, le=100, description="LLM fit score")
    explanation: str = Field(..., description="Why the job fits (<= 320 chars)")
    risks: Optional[str] = Field(None, description="Gaps or concerns (<= 200 chars)")
    highlighted_skills: List[str] = Field(
        default_factory=list, description="Candidate skills that drive the match"
    )

    @field_validator("job_id", mode="before")
    @classmethod
    def coerce_job_id(cls, v):
        """Accept numeric ids by converting them to strings."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("llm_score", mode="before")
    @classmethod
    def round_score(cls, v):
        """Round fractional scores half-up; range is checked afterwards."""
        if isinstance(v, float):
            if not math.isfinite(v):
                raise ValueError("llm_score must be a finite number")
            return round_half_up(v)
        return v

    @field_validator("explanation")
    @classmethod
    def require_explanation(cls, v: str) -> str:
        """Strip whitespace and reject empty explanations."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("explanation cannot be empty")
        return stripped

    @field_validator("risks")
    @classmethod
    def strip_risks(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace; blank risks become None."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    @field_validator("highlighted_skills", mode="before")
    @classmethod
    def default_skills(cls, v):
        """Treat a null skill list as empty."""
        return [] if v is None else v


class RerankResponse(BaseModel):
    """Top-level LLM response: ``{"results": [...]}``."""

    results: List[RerankResult]


def parse_rerank_response(raw: str) -> RerankResponse:
    """Parse and validate the raw LLM answer.

    Args:
        raw: JSON text returned by the chat model

    Returns:
        Validated RerankResponse

    Raises:
        LLMFailure: If the text is not JSON or does not match the schema
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise LLMFailure(f"LLM response is not valid JSON: {e}") from e

    try:
        return RerankResponse.model_validate(data)
    except ValidationError as e:
        raise LLMFailure(
            f"LLM response does not match the expected schema ({e.error_count()} error(s))"
        ) from e
    except (TypeError, ValueError, ArithmeticError) as e:
        raise LLMFailure(f"LLM response could not be validated: {e}") from e
