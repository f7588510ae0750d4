"""Centralized configuration for devverify.

Single source of truth for the enums, event names, cancellation codes and
user-facing text used by the verification panel.

Design Principles:
- Phase values mirror the verification engine's numbering
- Presentation modes are a closed set the frontend switches on
- Environment-driven settings live in small frozen dataclasses
"""

import os
from dataclasses import dataclass
from enum import Enum, IntEnum

# =============================================================================
# Enums for Type Safety
# =============================================================================


class Phase(IntEnum):
    """Lifecycle phase of a verification request.

    Ordered by protocol progression. CANCELLED is reachable from any
    non-terminal phase.
    """

    UNSENT = 1
    REQUESTED = 2
    READY = 3
    STARTED = 4
    CANCELLED = 5
    DONE = 6

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.DONE, Phase.CANCELLED)

    @classmethod
    def values(cls) -> list[int]:
        """Return all valid phase values."""
        return [phase.value for phase in cls]


class PresentationMode(Enum):
    """Which view the panel presents."""

    SCAN_OR_COMPARE = "scan_or_compare"
    EMOJI_ONLY = "emoji_only"
    COMPARE_EMOJI = "compare_emoji"
    AWAITING_PARTNER = "awaiting_partner"
    VERIFIED = "verified"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid mode values as strings."""
        return [mode.value for mode in cls]


class VerificationMethod(Enum):
    """Handshake sub-protocols the panel can ask the engine to begin."""

    SAS = "m.sas.v1"


# =============================================================================
# Engine Event Names
# =============================================================================

# Emitted by the request whenever any of its observable fields change
CHANGE_EVENT = "change"

# Emitted once by a SAS verifier when comparison data is available
SAS_READY_EVENT = "show_sas"


# =============================================================================
# Cancellation Codes
# =============================================================================

# The engine reports "m.timeout"; bare "timeout" is accepted from engines
# that strip the namespace.
TIMEOUT_CANCELLATION_CODES = frozenset({"m.timeout", "timeout"})


# =============================================================================
# User-Facing Text
# =============================================================================

TEXT_VERIFY_BY_EMOJI = "Verify by emoji"
TEXT_VERIFY_BY_SCANNING = "Verify by scanning"
TEXT_EMOJI_ONLY_HINT = "Verify by comparing unique emoji."
TEXT_EMOJI_FALLBACK_HINT = "If you can't scan the code above, verify by comparing unique emoji."
TEXT_SCAN_PROMPT = "Ask {display_name} to scan your code:"
TEXT_COMPARE_EMOJI = "Compare emoji"
TEXT_COMPARE_HINT = "Confirm the emoji below are displayed on both devices, in the same order:"
TEXT_MATCH = "They match"
TEXT_MISMATCH = "They don't match"
TEXT_AWAITING_PARTNER = "Waiting for {display_name} to verify…"
TEXT_VERIFIED_TITLE = "Verified"
TEXT_VERIFIED = "You've successfully verified {display_name}!"
TEXT_VERIFIED_HINT = "Verify all users in a room to ensure it's secure."
TEXT_CANCELLED_TITLE = "Verification cancelled"
TEXT_CANCELLED_TIMEOUT = "Verification timed out. Start verification again from their profile."
TEXT_CANCELLED_BY_THEM = (
    "{display_name} cancelled verification. Start verification again from their profile."
)
TEXT_CANCELLED_BY_YOU = "You cancelled verification. Start verification again from their profile."
TEXT_GOT_IT = "Got it"


# =============================================================================
# Panel Configuration
# =============================================================================

DEFAULT_PERMALINK_PREFIX = "https://matrix.to/#/"


@dataclass(frozen=True)
class PanelConfig:
    """Runtime settings for the verification panel.

    Values are read from environment variables with sensible defaults.
    """

    permalink_prefix: str = DEFAULT_PERMALINK_PREFIX
    qr_enabled: bool = True

    @classmethod
    def from_env(cls) -> "PanelConfig":
        """Create config from environment variables."""
        qr_enabled = os.getenv("DEVVERIFY_QR_ENABLED", "true").lower() in ("true", "1", "yes")
        return cls(
            permalink_prefix=os.getenv("DEVVERIFY_PERMALINK_PREFIX", DEFAULT_PERMALINK_PREFIX),
            qr_enabled=qr_enabled,
        )
