"""Tests for VerificationPanelController.

End-to-end scenarios against the in-memory engine: activation, the full
READY -> STARTED -> DONE flow, locally started SAS, stale challenge
handling on cancellation, and teardown on every exit path.
"""

import asyncio
import logging
from unittest import mock

import pytest

from devverify.config import CHANGE_EVENT, Phase, PresentationMode, VerificationMethod
from devverify.panel import ACTION_CLOSE, ACTION_CONFIRM, ACTION_START_EMOJI
from devverify.testing import BOB_USER_ID, FakeIdentityDirectory, FakeVerifier


async def _settle(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    """activate()/teardown() manage exactly one change subscription."""

    def test_activate_subscribes_once(self, make_controller, request_handle):
        controller = make_controller()
        controller.activate()
        controller.activate()

        assert controller.active is True
        assert request_handle.listener_count(CHANGE_EVENT) == 1

    def test_activate_runs_initial_evaluation(self, make_controller):
        on_update = mock.MagicMock()
        make_controller(on_update=on_update).activate()
        on_update.assert_called_once_with()

    def test_teardown_is_idempotent(self, make_controller, request_handle):
        controller = make_controller()
        controller.activate()
        controller.teardown()
        controller.teardown()

        assert controller.active is False
        assert request_handle.listener_count(CHANGE_EVENT) == 0

    def test_cannot_reactivate_after_teardown(self, make_controller):
        controller = make_controller()
        controller.activate()
        controller.teardown()
        with pytest.raises(RuntimeError):
            controller.activate()

    def test_context_manager_releases_on_error(self, make_controller, request_handle):
        with pytest.raises(ValueError):
            with make_controller():
                assert request_handle.listener_count(CHANGE_EVENT) == 1
                raise ValueError("panel closed abnormally")

        assert request_handle.listener_count(CHANGE_EVENT) == 0

    def test_changes_after_teardown_are_ignored(self, make_controller, request_handle):
        on_update = mock.MagicMock()
        controller = make_controller(on_update=on_update)
        controller.activate()
        controller.teardown()
        on_update.reset_mock()

        verifier = FakeVerifier()
        request_handle.update(phase=Phase.STARTED, verifier=verifier)

        on_update.assert_not_called()
        assert verifier.verify_calls == 0
        assert controller.watcher.has_attached_verifier is False

    @pytest.mark.asyncio
    async def test_activation_with_existing_verifier(self, make_controller, request_handle):
        verifier = FakeVerifier()
        request_handle.phase = Phase.STARTED
        request_handle.verifier = verifier
        controller = make_controller()
        controller.activate()
        await _settle()
        request_handle.update()
        await _settle()
        controller.teardown()

        assert verifier.verify_calls == 1

    def test_change_outside_event_loop_does_not_raise(self, make_controller, request_handle, caplog):
        controller = make_controller()
        controller.activate()
        verifier = FakeVerifier()

        with caplog.at_level(logging.ERROR, logger="devverify"):
            request_handle.update(phase=Phase.STARTED, verifier=verifier)
            request_handle.update()

        assert controller.watcher.has_attached_verifier is False
        assert verifier.verify_calls == 0
        assert "Could not schedule verification" in caplog.text
        assert controller.render().busy is True


# =============================================================================
# End-to-end flow
# =============================================================================


class TestVerificationFlow:
    """Full flow from READY to DONE with a remotely started verifier."""

    @pytest.mark.asyncio
    async def test_ready_to_done(self, make_controller, request_handle, on_close):
        controller = make_controller()
        controller.activate()

        view = controller.render()
        assert view.mode == PresentationMode.SCAN_OR_COMPARE
        assert view.qr is not None

        v1 = FakeVerifier(hold=True)
        request_handle.update(phase=Phase.STARTED, verifier=v1)
        await _settle()
        assert v1.verify_calls == 1
        assert controller.render().busy is True

        challenge = v1.show_sas()
        view = controller.render()
        assert view.mode == PresentationMode.COMPARE_EMOJI
        assert view.sas.emoji == [tuple(e) for e in challenge.sas["emoji"]]
        assert view.display_name == "Bob"

        view.action(ACTION_CONFIRM).handler()
        controller.confirm_match()
        assert challenge.confirm_calls == 1
        assert controller.render().mode == PresentationMode.AWAITING_PARTNER

        v1.complete()
        request_handle.update(phase=Phase.DONE)
        await _settle()

        view = controller.render()
        assert view.mode == PresentationMode.VERIFIED
        assert "Bob" in view.message
        view.action(ACTION_CLOSE).handler()
        controller.teardown()

        assert v1.verify_calls == 1
        on_close.assert_called_once_with()

    def test_sas_ready_triggers_update(self, make_controller, request_handle):
        on_update = mock.MagicMock()
        controller = make_controller(on_update=on_update, scheduler=lambda coro: coro.close())
        controller.activate()
        verifier = FakeVerifier()
        request_handle.update(phase=Phase.STARTED, verifier=verifier)
        on_update.reset_mock()

        verifier.show_sas()
        on_update.assert_called_once_with()

    def test_emoji_only_without_cross_signing(self, make_controller):
        controller = make_controller(directory=FakeIdentityDirectory(cross_signing={}))
        controller.activate()
        view = controller.render()

        assert view.mode == PresentationMode.EMOJI_ONLY
        assert view.action(ACTION_START_EMOJI) is not None


class TestLocalStart:
    """SAS started from this panel is verified by relay and watcher only once each."""

    @pytest.mark.asyncio
    async def test_start_emoji_verification(self, make_controller, request_handle):
        controller = make_controller()
        controller.activate()
        task = controller.render().action(ACTION_START_EMOJI).handler()
        await task
        await _settle()

        verifier = request_handle.verifier
        for _ in range(3):
            request_handle.update()
        await _settle()
        controller.teardown()

        assert request_handle.begin_calls == [VerificationMethod.SAS]
        # one await from the relay, one from the watcher's single attach
        assert verifier.verify_calls == 2


# =============================================================================
# Stale challenge handling
# =============================================================================


class TestStaleChallenge:
    """A challenge never outlives the STARTED phase or its verifier."""

    def _start_with_challenge(self, make_controller, request_handle):
        controller = make_controller(scheduler=lambda coro: coro.close())
        controller.activate()
        verifier = FakeVerifier()
        request_handle.update(phase=Phase.STARTED, verifier=verifier)
        challenge = verifier.show_sas()
        return controller, challenge

    def test_cancel_discards_challenge(self, make_controller, request_handle):
        controller, challenge = self._start_with_challenge(make_controller, request_handle)

        request_handle.cancel("m.user", BOB_USER_ID)

        assert controller.state.sas_challenge is None
        assert controller.render().mode == PresentationMode.CANCELLED
        assert controller.confirm_match() is False
        assert challenge.confirm_calls == 0

    def test_replaced_verifier_discards_challenge(self, make_controller, request_handle):
        controller, challenge = self._start_with_challenge(make_controller, request_handle)

        request_handle.update(verifier=FakeVerifier())

        assert controller.state.sas_challenge is None
        assert controller.render().busy is True
        assert controller.reject_mismatch() is False
        assert challenge.mismatch_calls == 0

    def test_challenge_not_rendered_outside_started(self, make_controller, request_handle):
        controller, _ = self._start_with_challenge(make_controller, request_handle)

        # phase moved without a change notification reaching the panel yet
        request_handle.phase = Phase.DONE
        assert controller.render().mode == PresentationMode.VERIFIED
