"""Decoding of raw verifier output into typed outcomes."""

import logging

from pydantic import ValidationError as PydanticValidationError

from video_kyc.domain.verification import (
    ConfidenceBand,
    VerificationOutcome,
    VerifierRecord,
)
from video_kyc.errors import MalformedVerifierOutput

logger = logging.getLogger(__name__)

HIGH_CONFIDENCE_SCORE = 0.80
MEDIUM_CONFIDENCE_SCORE = 0.60


def decode_verifier_output(raw: str) -> VerificationOutcome:
    """Parse the verifier's record, rejecting anything incomplete.

    The record is a JSON object. If the whole output is not one, only the last
    non-empty line is parsed, since verifiers print progress lines first.
    """
    record = _parse_record(raw)
    confidence = record.confidence or confidence_band_for(record.match_score)
    return VerificationOutcome(
        verified=record.verified,
        match_score=record.match_score,
        confidence_band=confidence,
        liveness_passed=record.liveness_check,
        message=record.message or _default_message(record),
    )


def confidence_band_for(match_score: float) -> ConfidenceBand:
    """Derive a confidence band from a match score."""
    if match_score >= HIGH_CONFIDENCE_SCORE:
        return ConfidenceBand.HIGH
    if match_score >= MEDIUM_CONFIDENCE_SCORE:
        return ConfidenceBand.MEDIUM
    return ConfidenceBand.LOW


def _parse_record(raw: str) -> VerifierRecord:
    text = raw.strip()
    if not text:
        raise MalformedVerifierOutput("Verifier produced no output")
    candidates = [text]
    last_line = text.splitlines()[-1].strip()
    if last_line != text:
        candidates.append(last_line)

    error: PydanticValidationError | None = None
    for candidate in candidates:
        try:
            return VerifierRecord.model_validate_json(candidate)
        except PydanticValidationError as exc:
            error = exc
            if not _is_json_syntax_error(exc):
                break
    logger.warning("Rejected verifier output: %s", error)
    raise MalformedVerifierOutput() from error


def _is_json_syntax_error(exc: PydanticValidationError) -> bool:
    return any(item["type"] == "json_invalid" for item in exc.errors())


def _default_message(record: VerifierRecord) -> str:
    if not record.liveness_check:
        return "Liveness check failed"
    if record.verified:
        return "Face verification successful"
    return "Face match failed"
