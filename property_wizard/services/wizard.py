"""
Wizard state machine - gated navigation over the four wizard steps.

Forward moves need a valid current step. A jump may land on a valid step
only when every step before it is valid as well, so an invalid units step
blocks the listings step even while the listing list is empty. Going back is
always allowed except from the first step. A refused move returns False
and leaves the state unchanged.
"""

from typing import Optional

from property_wizard.models.form_state import STEP_ORDER, WizardMode, WizardStep
from property_wizard.models.identity import Identity
from property_wizard.services.draft_store import DraftStore
from property_wizard.services.identity import IdentityProvider
from property_wizard.services.submission import SubmissionCoordinator, SubmissionResult
from property_wizard.utils.errors import IdentityError, SubmissionError
from property_wizard.utils.logging import get_structured_logger, mask_sensitive_data

logger = get_structured_logger(__name__)

PROGRESS_COMPLETED = "completed"
PROGRESS_CURRENT = "current"
PROGRESS_UPCOMING = "upcoming"


def _as_step(step) -> Optional[WizardStep]:
    """The WizardStep for `step`, or None for an unknown step name."""
    try:
        return WizardStep(step)
    except ValueError:
        return None


class PropertyWizard:
    """Drives a DraftStore through property -> units -> listings -> review."""

    STEP_ORDER = STEP_ORDER

    def __init__(
        self,
        store: DraftStore,
        coordinator: Optional[SubmissionCoordinator] = None,
        identity_provider: Optional[IdentityProvider] = None,
    ):
        self.store = store
        self.coordinator = coordinator
        self.identity_provider = identity_provider

    @property
    def current_step(self) -> WizardStep:
        return self.store.state.current_step

    def _index(self, step: WizardStep) -> int:
        return self.STEP_ORDER.index(step)

    def can_go_next(self) -> bool:
        step = self.current_step
        return (
            self._index(step) < len(self.STEP_ORDER) - 1
            and self.store.step_status(step).valid
        )

    def can_go_previous(self) -> bool:
        return self._index(self.current_step) > 0

    def go_to_next_step(self) -> bool:
        if not self.can_go_next():
            logger.debug("Next step refused", step=self.current_step.value)
            return False
        self.store.set_current_step(self.STEP_ORDER[self._index(self.current_step) + 1])
        return True

    def go_to_previous_step(self) -> bool:
        if not self.can_go_previous():
            return False
        self.store.set_current_step(self.STEP_ORDER[self._index(self.current_step) - 1])
        return True

    def can_go_to_step(self, step: WizardStep) -> bool:
        """The current step, or a valid step whose earlier steps are all valid too."""
        step = _as_step(step)
        if step is None:
            return False
        if step == self.current_step:
            return True
        return all(
            self.store.step_status(s).valid
            for s in self.STEP_ORDER[:self._index(step) + 1]
        )

    def go_to_step(self, step: WizardStep) -> bool:
        """Jump to `step`; unknown step names are refused like any other illegal move."""
        if not self.can_go_to_step(step):
            logger.debug("Step jump refused", step=self.current_step.value, target=str(step))
            return False
        self.store.set_current_step(WizardStep(step))
        return True

    def step_progress(self, step: WizardStep) -> str:
        """Stepper display state for `step`."""
        step = WizardStep(step)
        if step == self.current_step:
            return PROGRESS_CURRENT
        if self.store.step_status(step).completed:
            return PROGRESS_COMPLETED
        return PROGRESS_UPCOMING

    async def submit(self, identity: Optional[Identity] = None) -> Optional[SubmissionResult]:
        """
        Commit the draft from the review step.

        Returns None without writing anything when the wizard is not on a
        valid review step. On SubmissionError the FormState is left as it
        was, apart from `is_submitting`, so the user can retry.
        """
        state = self.store.state
        if state.current_step != WizardStep.REVIEW or not self.store.step_status(WizardStep.REVIEW).valid:
            logger.info("Submit refused: review step not reached or not valid", step=state.current_step.value)
            return None
        if state.is_submitting:
            return None
        if self.coordinator is None:
            raise SubmissionError("No submission coordinator configured")

        if identity is None:
            if self.identity_provider is None:
                raise IdentityError("You must be logged in to create a property")
            identity = await self.identity_provider.current_identity()

        mode = state.mode
        self.store.set_submitting(True)
        try:
            result = await self.coordinator.submit(state, identity)
        except SubmissionError as e:
            logger.error(
                "Wizard submission failed",
                mode=mode.value,
                error=mask_sensitive_data(str(e)),
                created_ids=e.created
            )
            raise
        finally:
            self.store.set_submitting(False)

        if mode == WizardMode.CREATE:
            self.store.reset()
        else:
            self.store.state.is_dirty = False
        return result
