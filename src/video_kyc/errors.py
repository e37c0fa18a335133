"""Error taxonomy for the verification core.

Every error carries an HTTP-style ``status_code`` and a ``public_message``
that is safe to hand to a client: no paths, no verifier output, no traces.
"""

from http import HTTPStatus


class KycError(Exception):
    """Base class for all errors raised by the core."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.public_message = message or self.default_message
        super().__init__(self.public_message)


class ValidationError(KycError):
    """Bad or missing upload input."""

    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid input"


class SessionNotFound(KycError):
    status_code = HTTPStatus.NOT_FOUND
    default_message = "Session not found"

    def __init__(self, session_id: object) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class IncompleteSession(KycError):
    status_code = HTTPStatus.CONFLICT
    default_message = "Session is missing a document or a video"


class DuplicateAttachment(KycError):
    status_code = HTTPStatus.CONFLICT
    default_message = "Artifact already attached to this session"


class InvalidTransition(KycError):
    status_code = HTTPStatus.CONFLICT
    default_message = "Session status can no longer change"


class StorageError(KycError):
    """Local storage fault; never retried inside the core."""

    default_message = "Failed to store artifact"


class VerificationError(KycError):
    """Verification could not produce a trustworthy outcome."""

    status_code = HTTPStatus.BAD_GATEWAY
    default_message = "Verification failed"


class VerifierProcessError(VerificationError):
    """The verifier exited with a non-zero code or could not be started."""

    def __init__(self, exit_code: int | None) -> None:
        self.exit_code = exit_code
        if exit_code is None:
            super().__init__("Verifier could not be started")
        else:
            super().__init__(f"Verifier exited with code {exit_code}")


class VerifierTimeout(VerificationError):
    status_code = HTTPStatus.GATEWAY_TIMEOUT

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Verifier did not finish within {timeout:g}s")


class MalformedVerifierOutput(VerificationError):
    default_message = "Verifier returned an unreadable result"
