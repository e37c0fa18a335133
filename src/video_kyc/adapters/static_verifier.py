"""Verifier used only when test mode is switched on explicitly."""

import json
import logging
from dataclasses import dataclass, field

from video_kyc.services.verification import VerifierClient

logger = logging.getLogger(__name__)

TEST_MODE_MESSAGE = "TEST MODE: no biometric check was performed"


@dataclass
class StaticVerifierClient(VerifierClient):
    """Returns a fixed, clearly labelled record without running anything."""

    record: dict[str, object] = field(
        default_factory=lambda: {
            "verified": True,
            "matchScore": 0.87,
            "confidence": "HIGH",
            "livenessCheck": True,
            "message": TEST_MODE_MESSAGE,
        }
    )

    async def invoke(self, document_ref: str, video_ref: str, timeout: float) -> str:
        logger.warning("Test-mode verifier used for %s", document_ref)
        return json.dumps(self.record)
