"""Dependency container wiring for the application."""

import logging
from dataclasses import dataclass

from supabase import create_client

from video_kyc.adapters.local_artifact_store import LocalArtifactStore
from video_kyc.adapters.memory_session_repository import InMemorySessionRepository
from video_kyc.adapters.static_verifier import StaticVerifierClient
from video_kyc.adapters.subprocess_verifier import SubprocessVerifierClient
from video_kyc.adapters.supabase_session_repository import SupabaseSessionRepository
from video_kyc.app_logging import configure_logging
from video_kyc.config import Settings, parse_verifier_command
from video_kyc.services.artifacts import ArtifactStore
from video_kyc.services.kyc import KycService
from video_kyc.services.registry import SessionRegistry, SessionRepository
from video_kyc.services.verification import VerificationService, VerifierClient

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_registry: SessionRegistry
    artifact_store: ArtifactStore
    verifier_client: VerifierClient
    verification_service: VerificationService
    kyc_service: KycService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    configure_logging()
    resolved_settings = settings or Settings()

    session_repository: SessionRepository
    if resolved_settings.supabase_url and resolved_settings.supabase_service_key:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        session_repository = SupabaseSessionRepository(supabase_client)
    else:
        session_repository = InMemorySessionRepository()

    verifier_client: VerifierClient
    if resolved_settings.verifier_test_mode:
        logger.warning("Verifier test mode is ON; outcomes are not real checks")
        verifier_client = StaticVerifierClient()
    else:
        verifier_client = SubprocessVerifierClient(
            command=parse_verifier_command(resolved_settings.verifier_command)
        )

    session_registry = SessionRegistry(session_repository)
    artifact_store = LocalArtifactStore.create(resolved_settings.upload_dir)
    verification_service = VerificationService(
        registry=session_registry,
        verifier=verifier_client,
        timeout_seconds=resolved_settings.verifier_timeout_seconds,
    )
    kyc_service = KycService(
        registry=session_registry,
        artifact_store=artifact_store,
        verification_service=verification_service,
    )

    return AppContainer(
        settings=resolved_settings,
        session_registry=session_registry,
        artifact_store=artifact_store,
        verifier_client=verifier_client,
        verification_service=verification_service,
        kyc_service=kyc_service,
    )
