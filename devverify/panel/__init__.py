"""Verification panel: phase dispatch, verifier lifecycle and user actions."""

from .actions import ActionRelay
from .controller import VerificationPanelController
from .dispatcher import (
    ACTION_CLOSE,
    ACTION_CONFIRM,
    ACTION_MISMATCH,
    ACTION_START_EMOJI,
    PhaseDispatcher,
)
from .state import PanelState, TaskScheduler
from .watcher import VerifierWatcher

__all__ = [
    "ACTION_CLOSE",
    "ACTION_CONFIRM",
    "ACTION_MISMATCH",
    "ACTION_START_EMOJI",
    "ActionRelay",
    "PanelState",
    "PhaseDispatcher",
    "TaskScheduler",
    "VerificationPanelController",
    "VerifierWatcher",
]
