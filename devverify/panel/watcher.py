"""Verifier lifecycle watcher.

Either side of a verification may start the handshake, so a verifier can
appear on the request because this panel asked for one or because a change
notification revealed one created by the other party. The watcher starts
every verifier instance exactly once, keyed by instance identity.
"""

import logging
from collections.abc import Callable, Coroutine
from functools import partial
from typing import Any

from devverify.config import SAS_READY_EVENT
from devverify.engine import SasChallenge, VerificationRequest, Verifier
from devverify.telemetry import verification_span

logger = logging.getLogger(__name__)

Scheduler = Callable[[Coroutine[Any, Any, Any]], Any]


class VerifierWatcher:
    """Attach to the request's active verifier and run verify() once per instance."""

    def __init__(
        self,
        request: VerificationRequest,
        on_sas_ready: Callable[[SasChallenge], None],
        scheduler: Scheduler,
    ):
        """
        Args:
            request: Verification request to observe
            on_sas_ready: Called with the challenge when the watched verifier
                has comparison data
            scheduler: Runs the verify() coroutine without blocking the caller
        """
        self.request = request
        self.on_sas_ready = on_sas_ready
        self.scheduler = scheduler
        self.has_attached_verifier = False
        self._watched: Verifier | None = None

    @property
    def watched_verifier(self) -> Verifier | None:
        return self._watched

    def evaluate(self) -> bool:
        """Re-check the request's verifier.

        Returns:
            True if a new verifier was attached by this call
        """
        verifier = self.request.verifier
        # a request without a verifier keeps the last instance watched, so
        # the same instance coming back is not verified again
        if verifier is None:
            return False

        if verifier is not self._watched and self.has_attached_verifier:
            logger.debug("Verifier on request changed, re-arming attach guard")
            self.has_attached_verifier = False
            self._watched = None

        if self.has_attached_verifier:
            return False

        coro = self._run_verify(verifier)
        try:
            self.scheduler(coro)
        except Exception as e:
            # guard stays down so the next change notification retries
            coro.close()
            logger.error(f"Could not schedule verification with {self.request.other_user_id}: {e}", exc_info=True)
            return False

        self.has_attached_verifier = True
        self._watched = verifier
        verifier.once(SAS_READY_EVENT, partial(self._handle_sas_ready, verifier))
        logger.info(f"Attached verifier for {self.request.other_user_id}")
        return True

    def is_current(self, verifier: Verifier) -> bool:
        """Whether the given instance is the one being watched."""
        return self.has_attached_verifier and verifier is self._watched

    def _handle_sas_ready(self, verifier: Verifier, challenge: SasChallenge) -> None:
        if not self.is_current(verifier):
            logger.debug("Ignoring SAS from a verifier that is no longer watched")
            return
        self.on_sas_ready(challenge)

    async def _run_verify(self, verifier: Verifier) -> None:
        # On the requesting side this is also awaited by the action relay;
        # the engine returns the same result to both callers.
        try:
            with verification_span("verify", self.request, initiator="watcher"):
                await verifier.verify()
        except Exception as e:
            logger.error(f"Verification with {self.request.other_user_id} failed: {e}", exc_info=True)
