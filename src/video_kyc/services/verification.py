"""Verification orchestration: invoke the verifier and record the verdict."""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from video_kyc.domain.sessions import Session, SessionStatus
from video_kyc.domain.verification import VerificationOutcome
from video_kyc.errors import (
    IncompleteSession,
    InvalidTransition,
    KycError,
    VerificationError,
)
from video_kyc.services.decoder import decode_verifier_output
from video_kyc.services.registry import SessionRegistry

logger = logging.getLogger(__name__)


class VerifierClient(Protocol):
    """Interface for running the external face verifier."""

    async def invoke(self, document_ref: str, video_ref: str, timeout: float) -> str:
        """Run the verifier and return its raw output."""


@dataclass
class VerificationService:
    """Runs one verification attempt per session and writes its final status.

    A session id sits in ``_in_flight`` from the moment it is claimed until
    the attempt ends; a second ``verify`` for it in that window
    is rejected without launching another run.
    """

    registry: SessionRegistry
    verifier: VerifierClient
    timeout_seconds: float
    _in_flight: set[UUID] = field(default_factory=set, init=False)
    _in_flight_lock: threading.Lock = field(
        default_factory=threading.Lock, init=False
    )

    async def verify(self, session_id: UUID) -> VerificationOutcome:
        """Verify a complete session and return the typed outcome."""
        session = self._claim(session_id)
        try:
            return await self._run(session_id, session.document_ref, session.video_ref)
        finally:
            with self._in_flight_lock:
                self._in_flight.discard(session_id)

    def _claim(self, session_id: UUID) -> Session:
        with self.registry.lock(session_id):
            session = self.registry.require(session_id)
            if session.document_ref is None or session.video_ref is None:
                raise IncompleteSession()
            if session.status.is_terminal:
                raise InvalidTransition(
                    f"Session was already verified ({session.status})"
                )
            with self._in_flight_lock:
                if session_id in self._in_flight:
                    raise InvalidTransition("Verification already in progress")
                self._in_flight.add(session_id)
        return session

    async def _run(
        self, session_id: UUID, document_ref: str, video_ref: str
    ) -> VerificationOutcome:
        started = time.monotonic()
        try:
            raw = await self.verifier.invoke(
                document_ref, video_ref, self.timeout_seconds
            )
            outcome = decode_verifier_output(raw)
        except KycError as exc:
            self._mark_failed(session_id, exc)
            raise
        except Exception as exc:
            logger.exception("Unexpected verifier failure for session %s", session_id)
            self._mark_failed(session_id, exc)
            raise VerificationError() from exc

        status = SessionStatus.VERIFIED if outcome.verified else SessionStatus.FAILED
        self.registry.set_status(session_id, status)
        logger.info(
            "Session %s verified=%s score=%.3f liveness=%s in %.0f ms",
            session_id,
            outcome.verified,
            outcome.match_score,
            outcome.liveness_passed,
            (time.monotonic() - started) * 1000,
        )
        return outcome

    def _mark_failed(self, session_id: UUID, error: Exception) -> None:
        logger.warning("Verification failed for session %s: %s", session_id, error)
        try:
            self.registry.set_status(session_id, SessionStatus.FAILED)
        except InvalidTransition:
            logger.warning("Session %s already left PENDING", session_id)
