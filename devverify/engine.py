"""Interfaces of the collaborators the verification panel observes.

The verification engine owns the handshake protocol and cryptography; the
identity directory resolves local and remote key material. The panel only
depends on the structural shapes below.
"""

from collections.abc import Callable, Mapping
from typing import Any, Protocol

from devverify.config import Phase, VerificationMethod

Handler = Callable[..., Any]


class SasChallenge(Protocol):
    """Comparison data emitted by a SAS verifier, plus the user's answers."""

    sas: Mapping[str, Any]

    def confirm(self) -> Any: ...

    def mismatch(self) -> Any: ...


class Verifier(Protocol):
    """One run of a handshake sub-protocol bound to a single request.

    ``verify()`` must be safe to await from more than one call site for the
    same instance.
    """

    async def verify(self) -> Any: ...

    def once(self, event: str, handler: Handler) -> None: ...


class RequestEvent(Protocol):
    """The event that originated the verification request."""

    event_id: str | None


class VerificationRequest(Protocol):
    """Engine handle shared by the caller and the panel."""

    phase: Phase
    other_user_id: str
    cancellation_code: str | None
    cancelling_user_id: str | None
    verifier: Verifier | None
    request_event: RequestEvent | None
    encoded_shared_secret: str | None

    def on(self, event: str, handler: Handler) -> None: ...

    def off(self, event: str, handler: Handler) -> None: ...

    def begin_verification(self, method: VerificationMethod) -> Verifier: ...


class CrossSigningInfo(Protocol):
    """Stored cross-signing keys of another user."""

    def get_id(self, kind: str = "master") -> str | None: ...


class IdentityDirectory(Protocol):
    """Local session identity and stored cross-signing lookups."""

    def get_user_id(self) -> str | None: ...

    def get_device_id(self) -> str | None: ...

    def get_device_ed25519_key(self) -> str | None: ...

    def get_cross_signing_id(self) -> str | None: ...

    def get_stored_cross_signing_for_user(self, user_id: str) -> CrossSigningInfo | None: ...
