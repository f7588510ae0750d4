"""Relay of user actions to the verification engine."""

import logging

from devverify.config import Phase, VerificationMethod
from devverify.engine import VerificationRequest
from devverify.panel.state import PanelState
from devverify.telemetry import verification_span

logger = logging.getLogger(__name__)


class ActionRelay:
    """Forward start/confirm/reject actions, each at most once per challenge."""

    def __init__(self, request: VerificationRequest, state: PanelState):
        self.request = request
        self.state = state
        self._starting = False

    @property
    def pending(self) -> bool:
        """A SAS start is in flight or the request already has a verifier."""
        return self._starting or self.request.verifier is not None

    async def start_emoji_verification(self) -> None:
        """Ask the engine to begin SAS and wait for the handshake to finish.

        The watcher will see the same verifier through the change
        notification and skip it, since it is already attached.
        """
        if self.pending:
            logger.debug("Emoji verification already pending, ignoring start")
            return
        if self.request.phase != Phase.READY:
            logger.debug(f"Cannot start emoji verification in phase {self.request.phase!r}")
            return

        self._starting = True
        try:
            with verification_span("start_sas", self.request, initiator="local"):
                verifier = self.request.begin_verification(VerificationMethod.SAS)
                await verifier.verify()
        except Exception as e:
            logger.error(f"Emoji verification with {self.request.other_user_id} failed: {e}", exc_info=True)
        finally:
            self._starting = False

    def confirm_match(self) -> bool:
        """Tell the engine the emoji match.

        Returns:
            True if a challenge was answered, False if there was none
        """
        challenge = self.state.sas_challenge
        if challenge is None:
            logger.debug("confirm_match with no active SAS challenge")
            return False
        # state only changes once the engine has taken the answer
        challenge.confirm()
        self.state.sas_challenge = None
        self.state.awaiting_partner = True
        return True

    def reject_mismatch(self) -> bool:
        """Tell the engine the emoji differ.

        Returns:
            True if a challenge was answered, False if there was none
        """
        challenge = self.state.sas_challenge
        if challenge is None:
            logger.debug("reject_mismatch with no active SAS challenge")
            return False
        challenge.mismatch()
        self.state.clear_challenge()
        return True
