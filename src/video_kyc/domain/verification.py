"""Models for verifier results."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


class ConfidenceBand(StrEnum):
    """Coarse summary of match certainty."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class VerifierRecord(BaseModel):
    """Structured record printed by the external verifier."""

    model_config = ConfigDict(extra="ignore")

    verified: StrictBool
    match_score: float = Field(alias="matchScore", ge=0.0, le=1.0, strict=True)
    liveness_check: StrictBool = Field(alias="livenessCheck")
    confidence: ConfidenceBand | None = None
    message: str | None = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _normalize_confidence(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class VerificationOutcome(BaseModel):
    """Immutable result of one verification attempt."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    verified: bool
    match_score: float = Field(alias="matchScore", ge=0.0, le=1.0)
    confidence_band: ConfidenceBand = Field(alias="confidenceBand")
    liveness_passed: bool = Field(alias="livenessPassed")
    message: str = Field(min_length=1)

    def to_dict(self) -> dict[str, object]:
        """Serialize using the public field names."""
        return self.model_dump(by_alias=True, mode="json")
