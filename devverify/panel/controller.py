"""Verification panel controller.

Ties the phase dispatcher, verifier watcher and action relay to one
verification request for the lifetime of a panel.

Lifecycle:
    controller = VerificationPanelController(request, member, directory, on_close)
    controller.activate()    # subscribe to "change" and evaluate once
    view = controller.render()
    ...
    controller.teardown()    # unsubscribe

The controller is also a context manager, so the subscription is released
on every exit path:

    with VerificationPanelController(...) as controller:
        ...
"""

import logging
from collections.abc import Callable
from typing import Any

from devverify.config import CHANGE_EVENT, PanelConfig, Phase
from devverify.engine import IdentityDirectory, SasChallenge, VerificationRequest
from devverify.models import Member, PanelView
from devverify.panel.actions import ActionRelay
from devverify.panel.dispatcher import PhaseDispatcher
from devverify.panel.state import PanelState, TaskScheduler
from devverify.panel.watcher import Scheduler, VerifierWatcher

logger = logging.getLogger(__name__)


class VerificationPanelController:
    """Drives the verification panel for a single request."""

    def __init__(
        self,
        request: VerificationRequest,
        member: Member,
        directory: IdentityDirectory,
        on_close: Callable[[], Any],
        on_update: Callable[[], Any] | None = None,
        scheduler: Scheduler | None = None,
        config: PanelConfig | None = None,
    ):
        """
        Args:
            request: Engine handle for the verification
            member: The other party
            directory: Identity/session key lookups
            on_close: Called when the user acknowledges DONE or CANCELLED
            on_update: Called after each change notification so the caller
                can re-render
            scheduler: Runs verify() coroutines; defaults to tasks on the
                running event loop
            config: Panel settings; defaults to PanelConfig.from_env()
        """
        self.request = request
        self.member = member
        self.on_update = on_update
        self.scheduler = scheduler or TaskScheduler()
        self.state = PanelState()

        self.relay = ActionRelay(request, self.state)
        self.watcher = VerifierWatcher(request, self._set_sas_challenge, self.scheduler)
        self.dispatcher = PhaseDispatcher(
            request,
            directory,
            on_close=on_close,
            on_start_emoji=self.start_emoji_verification,
            on_confirm=self.confirm_match,
            on_mismatch=self.reject_mismatch,
            config=config or PanelConfig.from_env(),
        )

        self._active = False
        self._torn_down = False
        # same bound method for on() and off()
        self._change_handler = self._on_request_change

    @property
    def active(self) -> bool:
        return self._active

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def activate(self) -> None:
        """Subscribe to request changes and run the initial evaluation.

        Raises:
            RuntimeError: If the controller was already torn down
        """
        if self._torn_down:
            raise RuntimeError("Cannot re-activate a torn down verification panel")
        if self._active:
            logger.debug("Verification panel already active")
            return

        self.request.on(CHANGE_EVENT, self._change_handler)
        self._active = True
        logger.info(f"Verification panel activated for {self.request.other_user_id}")
        self._on_request_change()

    def teardown(self) -> None:
        """Unsubscribe from request changes. Safe to call more than once."""
        if self._active:
            self.request.off(CHANGE_EVENT, self._change_handler)
            logger.info(f"Verification panel torn down for {self.request.other_user_id}")
        self._active = False
        self._torn_down = True

    def __enter__(self) -> "VerificationPanelController":
        self.activate()
        return self

    def __exit__(self, *args) -> None:
        self.teardown()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> PanelView | None:
        """Current presentation for the request's phase."""
        phase = self.request.phase
        challenge = self.state.sas_challenge if phase == Phase.STARTED else None
        return self.dispatcher.render(
            phase,
            self.member,
            sas_challenge=challenge,
            awaiting_partner=self.state.awaiting_partner and phase == Phase.STARTED,
        )

    # -------------------------------------------------------------------------
    # User actions
    # -------------------------------------------------------------------------

    def start_emoji_verification(self) -> Any:
        """Schedule a SAS start; returns the scheduled task."""
        return self.scheduler(self.relay.start_emoji_verification())

    def confirm_match(self) -> bool:
        return self.relay.confirm_match()

    def reject_mismatch(self) -> bool:
        return self.relay.reject_mismatch()

    # -------------------------------------------------------------------------
    # Engine notifications
    # -------------------------------------------------------------------------

    def _on_request_change(self, *args: Any) -> None:
        if not self._active:
            return

        previous = self.watcher.watched_verifier
        verifier_changed = previous is not None and self.request.verifier is not previous
        if self.request.phase != Phase.STARTED or verifier_changed:
            if self.state.sas_challenge is not None:
                logger.debug(f"Discarding SAS challenge in phase {self.request.phase!r}")
            self.state.clear_challenge()

        self.watcher.evaluate()
        self._notify()

    def _set_sas_challenge(self, challenge: SasChallenge) -> None:
        if not self._active:
            return
        self.state.sas_challenge = challenge
        self.state.awaiting_partner = False
        self._notify()

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update()
