"""Phase dispatcher: choose what the verification panel shows.

Each phase of the request maps to one presentation mode:

    READY                  -> SCAN_OR_COMPARE (or EMOJI_ONLY without key material)
    STARTED, no challenge  -> READY visual with a busy indicator
    STARTED, challenge     -> COMPARE_EMOJI
    STARTED, answered      -> AWAITING_PARTNER
    DONE                   -> VERIFIED
    CANCELLED              -> CANCELLED

Any other phase has no presentation and is logged as unhandled.
"""

import logging
from collections.abc import Callable
from typing import Any

from devverify.config import (
    TEXT_AWAITING_PARTNER,
    TEXT_CANCELLED_BY_THEM,
    TEXT_CANCELLED_BY_YOU,
    TEXT_CANCELLED_TIMEOUT,
    TEXT_CANCELLED_TITLE,
    TEXT_COMPARE_EMOJI,
    TEXT_COMPARE_HINT,
    TEXT_EMOJI_FALLBACK_HINT,
    TEXT_EMOJI_ONLY_HINT,
    TEXT_GOT_IT,
    TEXT_MATCH,
    TEXT_MISMATCH,
    TEXT_SCAN_PROMPT,
    TEXT_VERIFIED,
    TEXT_VERIFIED_HINT,
    TEXT_VERIFIED_TITLE,
    TEXT_VERIFY_BY_EMOJI,
    TEXT_VERIFY_BY_SCANNING,
    TIMEOUT_CANCELLATION_CODES,
    PanelConfig,
    Phase,
    PresentationMode,
)
from devverify.engine import IdentityDirectory, SasChallenge, VerificationRequest
from devverify.models import Member, PanelAction, PanelView, SasComparison
from devverify.qr import build_qr_code

logger = logging.getLogger(__name__)

# Action keys the frontend can rely on
ACTION_START_EMOJI = "start_emoji"
ACTION_CONFIRM = "confirm"
ACTION_MISMATCH = "mismatch"
ACTION_CLOSE = "close"


class PhaseDispatcher:
    """Map the request's phase and local sub-state to a PanelView."""

    def __init__(
        self,
        request: VerificationRequest,
        directory: IdentityDirectory,
        on_close: Callable[[], Any],
        on_start_emoji: Callable[[], Any],
        on_confirm: Callable[[], Any],
        on_mismatch: Callable[[], Any],
        config: PanelConfig | None = None,
    ):
        self.request = request
        self.directory = directory
        self.on_close = on_close
        self.on_start_emoji = on_start_emoji
        self.on_confirm = on_confirm
        self.on_mismatch = on_mismatch
        self.config = config or PanelConfig()

    def render(
        self,
        phase: Phase,
        member: Member,
        sas_challenge: SasChallenge | None = None,
        awaiting_partner: bool = False,
    ) -> PanelView | None:
        """Select the presentation for the given phase.

        Args:
            phase: Current phase of the request
            member: The other party
            sas_challenge: Live challenge, only consulted in STARTED
            awaiting_partner: The user already confirmed the challenge

        Returns:
            PanelView, or None for phases without a presentation
        """
        if phase == Phase.READY:
            return self.render_scan_or_compare(member)
        if phase == Phase.STARTED:
            if sas_challenge is not None:
                return self.render_compare_emoji(member, sas_challenge)
            if awaiting_partner:
                return self.render_awaiting_partner(member)
            # keep showing the ready view, with a spinner instead of the button
            return self.render_scan_or_compare(member, pending=True)
        if phase == Phase.DONE:
            return self.render_verified(member)
        if phase == Phase.CANCELLED:
            return self.render_cancelled(member)

        logger.error(f"Verification panel unhandled phase: {phase!r}")
        return None

    def render_scan_or_compare(self, member: Member, pending: bool = False) -> PanelView:
        actions = []
        if not pending:
            actions.append(
                PanelAction(
                    key=ACTION_START_EMOJI,
                    label=TEXT_VERIFY_BY_EMOJI,
                    handler=self.on_start_emoji,
                )
            )

        qr = build_qr_code(self.request, self.directory) if self.config.qr_enabled else None
        if qr is None:
            # no QR code possible, offer SAS only
            return PanelView(
                mode=PresentationMode.EMOJI_ONLY,
                title=TEXT_VERIFY_BY_EMOJI,
                message=TEXT_EMOJI_ONLY_HINT,
                display_name=member.label,
                busy=pending,
                actions=actions,
            )

        return PanelView(
            mode=PresentationMode.SCAN_OR_COMPARE,
            title=TEXT_VERIFY_BY_SCANNING,
            message=TEXT_SCAN_PROMPT.format(display_name=member.label),
            hint=TEXT_EMOJI_FALLBACK_HINT,
            display_name=member.label,
            qr=qr,
            qr_uri=qr.to_uri(self.config.permalink_prefix),
            busy=pending,
            actions=actions,
        )

    def render_compare_emoji(self, member: Member, sas_challenge: SasChallenge) -> PanelView:
        return PanelView(
            mode=PresentationMode.COMPARE_EMOJI,
            title=TEXT_COMPARE_EMOJI,
            message=TEXT_COMPARE_HINT,
            display_name=member.label,
            sas=SasComparison.from_sas(sas_challenge.sas),
            actions=[
                PanelAction(
                    key=ACTION_MISMATCH,
                    label=TEXT_MISMATCH,
                    handler=self.on_mismatch,
                    kind="danger",
                ),
                PanelAction(key=ACTION_CONFIRM, label=TEXT_MATCH, handler=self.on_confirm),
            ],
        )

    def render_awaiting_partner(self, member: Member) -> PanelView:
        return PanelView(
            mode=PresentationMode.AWAITING_PARTNER,
            title=TEXT_COMPARE_EMOJI,
            message=TEXT_AWAITING_PARTNER.format(display_name=member.label),
            display_name=member.label,
            busy=True,
        )

    def render_verified(self, member: Member) -> PanelView:
        return PanelView(
            mode=PresentationMode.VERIFIED,
            title=TEXT_VERIFIED_TITLE,
            message=TEXT_VERIFIED.format(display_name=member.label),
            hint=TEXT_VERIFIED_HINT,
            display_name=member.label,
            actions=[self._close_action()],
        )

    def render_cancelled(self, member: Member) -> PanelView:
        request = self.request
        if request.cancellation_code in TIMEOUT_CANCELLATION_CODES:
            text = TEXT_CANCELLED_TIMEOUT
        elif request.cancelling_user_id == request.other_user_id:
            text = TEXT_CANCELLED_BY_THEM.format(display_name=member.label)
        else:
            text = TEXT_CANCELLED_BY_YOU

        return PanelView(
            mode=PresentationMode.CANCELLED,
            title=TEXT_CANCELLED_TITLE,
            message=text,
            display_name=member.label,
            actions=[self._close_action()],
        )

    def _close_action(self) -> PanelAction:
        return PanelAction(key=ACTION_CLOSE, label=TEXT_GOT_IT, handler=self.on_close)
