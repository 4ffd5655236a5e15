"""
Wizard flow: sessions, form submissions, navigation and generation.
"""

from typing import Any, Optional

from vibeocm.core.config import Settings, get_settings
from vibeocm.core.constants import ALL_ARTIFACTS, AuthMethod, WizardStep
from vibeocm.core.exceptions import (
    ArtifactGenerationError,
    ArtifactNotFoundError,
    InvalidPassphraseError,
    InvalidRequestError,
    NotFoundError,
    SessionNotFoundError,
    VibeOCMError,
    WizardStepError,
)
from vibeocm.core.logging import bind_context, get_logger
from vibeocm.core.security import generate_session_id, validate_passphrase
from vibeocm.domain.project import (
    BenefitsForm,
    Credentials,
    ProjectBasicsForm,
    StakeholdersForm,
)
from vibeocm.domain.session import BulkProgress, WizardSession
from vibeocm.llm.providers import resolve_api_config
from vibeocm.orchestration.state_machine import (
    StateMachine,
    StateTransitionError,
    create_wizard_state_machine,
)
from vibeocm.repositories.session_repo import InMemorySessionRepository
from vibeocm.services.analytics import AnalyticsClient, AnalyticsEvent
from vibeocm.services.artifact_service import ArtifactGenerator
from vibeocm.services.packaging import (
    artifact_file_name,
    build_zip,
    error_file_name,
    error_placeholder,
    zip_file_name,
)

logger = get_logger(__name__)

GENERATION_STEPS = (WizardStep.ARTIFACT_SELECTION, WizardStep.RESULTS)
REFINEMENT_STEPS = (WizardStep.RESULTS, WizardStep.REFINEMENT)


class WizardService:
    """
    Drives a session through the wizard steps.

    Every mutating call validates the session's current step against the
    state machine and saves the session afterwards.
    """

    def __init__(
        self,
        generator: ArtifactGenerator,
        analytics: AnalyticsClient,
        session_repository: Optional[InMemorySessionRepository] = None,
        state_machine: Optional[StateMachine] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the wizard service.

        Args:
            generator: Artifact generator
            analytics: Analytics client
            session_repository: Session repository
            state_machine: Step transition rules
            settings: Application settings
        """
        self.generator = generator
        self.analytics = analytics
        self.settings = settings or get_settings()
        self.session_repository = session_repository or InMemorySessionRepository(
            ttl_hours=self.settings.session_ttl_hours
        )
        self.state_machine = state_machine or create_wizard_state_machine()

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def create_session(self, metadata: Optional[dict[str, Any]] = None) -> WizardSession:
        """Create a session and move it past the landing step."""
        await self.cleanup_expired_sessions()

        session = WizardSession(session_id=generate_session_id(), metadata=metadata or {})
        bind_context(session_id=session.session_id)
        await self.analytics.capture_event(
            AnalyticsEvent.SESSION_CREATED, {}, distinct_id=session.distinct_id
        )
        await self._advance(session, WizardStep.API_KEY)
        await self.session_repository.save(session)

        logger.info("Session created", session_id=session.session_id)
        return session

    async def get_session(self, session_id: str) -> WizardSession:
        """
        Get a session by ID.

        Raises:
            SessionNotFoundError: If the session does not exist or has expired
        """
        session = await self.session_repository.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        bind_context(session_id=session_id)
        return session

    async def cleanup_expired_sessions(self) -> int:
        return await self.session_repository.cleanup_expired()

    # -------------------------------------------------------------------------
    # Forms
    # -------------------------------------------------------------------------

    async def submit_auth(self, session_id: str, credentials: Credentials) -> WizardSession:
        """
        Accept credentials and move to project basics.

        Raises:
            InvalidPassphraseError: Passphrase did not match the configured hash
        """
        session = await self.get_session(session_id)
        self._require_step(session, (WizardStep.API_KEY,), "submit credentials")
        method = credentials.auth_method

        if method is AuthMethod.PASSPHRASE:
            await self.analytics.capture_event(
                AnalyticsEvent.PASSPHRASE_SUBMITTED, {}, distinct_id=session.distinct_id
            )
            if not validate_passphrase(
                credentials.passphrase_value, self.settings.security.hashed_passphrase
            ):
                await self.analytics.capture_event(
                    AnalyticsEvent.AUTHENTICATION_ERROR,
                    {"auth_method": method.value, "reason": "invalid_passphrase"},
                    distinct_id=session.distinct_id,
                )
                error = InvalidPassphraseError()
                session.set_error(error.message)
                await self.session_repository.save(session)
                raise error
        elif method is AuthMethod.TRIAL:
            await self.analytics.capture_event(
                AnalyticsEvent.TRIAL_SUBMITTED,
                {"trial_available": self.settings.trial.available},
                distinct_id=session.distinct_id,
            )

        # The passphrase is only needed once
        session.credentials = credentials.model_copy(update={"passphrase": None})
        session.set_error(None)
        await self._advance(session, WizardStep.PROJECT_BASICS)
        await self.session_repository.save(session)

        logger.info("Credentials accepted", auth_method=method.value)
        return session

    async def submit_project_basics(self, session_id: str, form: ProjectBasicsForm) -> WizardSession:
        return await self._submit_form(session_id, form, WizardStep.PROJECT_BASICS, WizardStep.STAKEHOLDERS)

    async def submit_stakeholders(self, session_id: str, form: StakeholdersForm) -> WizardSession:
        return await self._submit_form(session_id, form, WizardStep.STAKEHOLDERS, WizardStep.BENEFITS)

    async def submit_benefits(self, session_id: str, form: BenefitsForm) -> WizardSession:
        return await self._submit_form(session_id, form, WizardStep.BENEFITS, WizardStep.ARTIFACT_SELECTION)

    async def _submit_form(
        self,
        session_id: str,
        form: Any,
        step: WizardStep,
        next_step: WizardStep,
    ) -> WizardSession:
        session = await self.get_session(session_id)
        self._require_step(session, (step,), f"submit {step.value}")

        session.project = session.project.merge(form)
        session.set_error(None)
        await self._advance(session, next_step)
        await self.session_repository.save(session)
        return session

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    async def go_back(self, session_id: str) -> WizardSession:
        """Return to the previous step; a no-op on steps without one."""
        session = await self.get_session(session_id)
        previous = WizardStep(self.state_machine.previous(session.current_step.value))
        if previous is not session.current_step:
            session.set_error(None)
            await self._advance(session, previous)
            await self.session_repository.save(session)
        return session

    async def start_over(self, session_id: str) -> WizardSession:
        """Clear the selection and return to artifact selection."""
        session = await self.get_session(session_id)
        previous_artifact = session.selected_artifact

        if session.current_step is not WizardStep.ARTIFACT_SELECTION:
            await self._advance(session, WizardStep.ARTIFACT_SELECTION)
        await self.analytics.capture_event(
            AnalyticsEvent.GENERATE_ANOTHER,
            {"previous_artifact": previous_artifact},
            distinct_id=session.distinct_id,
        )
        session.selected_artifact = None
        session.set_error(None)
        await self.session_repository.save(session)
        return session

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    async def select_artifact(self, session_id: str, artifact_type: str) -> WizardSession:
        """
        Generate one artifact and show it.

        On failure the session stays on its step and records the message.
        """
        session = await self.get_session(session_id)
        self._require_step(session, GENERATION_STEPS, "generate an artifact")
        artifact_type = artifact_type.strip()
        if not artifact_type:
            raise InvalidRequestError("Artifact type is required", field="artifact_type")

        try:
            api_config = resolve_api_config(self._credentials(session), settings=self.settings)
            artifact = await self.generator.generate_artifact(
                artifact_type, session.project, api_config, distinct_id=session.distinct_id
            )
        except VibeOCMError as e:
            session.set_error(e.message)
            await self.session_repository.save(session)
            raise

        session.store_artifact(artifact)
        session.set_error(None)
        await self._advance(session, WizardStep.RESULTS)
        await self.session_repository.save(session)
        return session

    async def refine(self, session_id: str, feedback: str) -> WizardSession:
        """Revise the selected artifact using the user's feedback."""
        session = await self.get_session(session_id)
        self._require_step(session, REFINEMENT_STEPS, "refine an artifact")
        feedback = feedback.strip()
        if not feedback:
            raise InvalidRequestError("Please provide feedback for refinement", field="feedback")

        artifact = session.selected
        if artifact is None:
            raise ArtifactNotFoundError(session.selected_artifact or "selected artifact")

        if session.current_step is WizardStep.RESULTS:
            await self._advance(session, WizardStep.REFINEMENT)

        try:
            api_config = resolve_api_config(self._credentials(session), settings=self.settings)
            await self.generator.refine(
                artifact, feedback, session.project, api_config, distinct_id=session.distinct_id
            )
        except VibeOCMError as e:
            session.set_error(e.message)
            await self.session_repository.save(session)
            raise

        session.set_error(None)
        await self._advance(session, WizardStep.RESULTS)
        await self.session_repository.save(session)
        return session

    async def generate_all(self, session_id: str) -> tuple[bytes, str]:
        """
        Generate every built-in artifact and package them as a ZIP.

        A failed artifact does not stop the run; it becomes an -ERROR.md
        placeholder in the archive.

        Returns:
            (ZIP bytes, file name)
        """
        session = await self.get_session(session_id)
        self._require_step(session, GENERATION_STEPS, "generate all artifacts")
        api_config = resolve_api_config(self._credentials(session), settings=self.settings)

        await self.analytics.capture_event(
            AnalyticsEvent.LAZY_GENERATION,
            {"auth_method": api_config.auth_method.value, "artifact_count": len(ALL_ARTIFACTS)},
            distinct_id=session.distinct_id,
        )

        session.bulk = BulkProgress(running=True)
        session.set_error(None)
        files: list[tuple[str, str]] = []

        for index, artifact_type in enumerate(ALL_ARTIFACTS, start=1):
            session.bulk.current_artifact = artifact_type
            await self.session_repository.save(session)
            try:
                artifact = await self.generator.generate_artifact(
                    artifact_type, session.project, api_config, distinct_id=session.distinct_id
                )
            except ArtifactGenerationError as e:
                logger.warning("Bulk generation skipped artifact", artifact_type=artifact_type, error=e.message)
                session.bulk.failed.append(artifact_type)
                files.append((error_file_name(artifact_type), error_placeholder(artifact_type)))
            else:
                session.artifacts[artifact_type] = artifact
                session.bulk.completed.append(artifact_type)
                files.append((artifact_file_name(artifact_type), artifact.content))
            session.bulk.percent = round(index / len(ALL_ARTIFACTS) * 100, 1)

        session.bulk.running = False
        session.bulk.current_artifact = None

        if session.bulk.completed:
            session.selected_artifact = session.bulk.completed[0]
            await self._advance(session, WizardStep.RESULTS)
        else:
            session.set_error("Failed to generate any artifacts. Please try generating them individually.")
        await self.session_repository.save(session)

        logger.info(
            "Bulk generation finished",
            completed=len(session.bulk.completed),
            failed=len(session.bulk.failed),
        )
        return build_zip(files), zip_file_name(session.project.name)

    # -------------------------------------------------------------------------
    # Downloads
    # -------------------------------------------------------------------------

    async def download_all(self, session_id: str) -> tuple[bytes, str]:
        """ZIP of every artifact generated so far."""
        session = await self.get_session(session_id)
        if not session.artifacts:
            raise NotFoundError(resource_type="Artifact", message="No artifacts have been generated yet")
        files = [
            (artifact_file_name(name), artifact.content)
            for name, artifact in session.artifacts.items()
        ]
        return build_zip(files), zip_file_name(session.project.name)

    async def download_artifact(self, session_id: str, artifact_type: str) -> tuple[str, str]:
        """Markdown content and file name for one artifact."""
        session = await self.get_session(session_id)
        artifact = session.artifacts.get(artifact_type)
        if artifact is None:
            raise ArtifactNotFoundError(artifact_type)
        return artifact.content, artifact_file_name(artifact_type)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_step(self, session: WizardSession, allowed: tuple[WizardStep, ...], action: str) -> None:
        if session.current_step not in allowed:
            raise WizardStepError(
                current_step=session.current_step.value,
                requested=action,
                message=f"Cannot {action} from step '{session.current_step.value}'",
            )

    def _credentials(self, session: WizardSession) -> Credentials:
        if session.credentials is None:
            raise WizardStepError(
                current_step=session.current_step.value,
                requested="generate",
                message="Please authenticate before generating artifacts",
            )
        return session.credentials

    async def _advance(self, session: WizardSession, step: WizardStep) -> None:
        """Move to a step if the state machine allows it."""
        current = session.current_step
        try:
            self.state_machine.transition(current.value, step.value)
        except StateTransitionError as e:
            raise WizardStepError(current_step=current.value, requested=step.value) from e

        session.move_to(step)
        await self.analytics.capture_event(
            AnalyticsEvent.NAVIGATE_STEP,
            {"from": current.value, "to": step.value},
            distinct_id=session.distinct_id,
        )
