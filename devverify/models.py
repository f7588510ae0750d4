"""Data models for the verification panel.

Pydantic models hold data that crosses the engine/panel boundary; the
presentation descriptors handed to the frontend are plain dataclasses
because they carry callables.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from devverify.config import DEFAULT_PERMALINK_PREFIX, PresentationMode


class Member(BaseModel):
    """The other party of the verification, as supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(description="Fully qualified user id")
    display_name: str | None = Field(default=None, description="Room or profile display name")
    name: str | None = Field(default=None, description="Fallback name")

    @property
    def label(self) -> str:
        """Name to show in user-facing text."""
        return self.display_name or self.name or self.user_id


class SasComparison(BaseModel):
    """Short authentication string the two users compare."""

    model_config = ConfigDict(frozen=True)

    emoji: list[tuple[str, str]] = Field(
        default_factory=list, description="(symbol, name) pairs in display order"
    )
    decimal: tuple[int, int, int] | None = Field(
        default=None, description="Three-number fallback representation"
    )

    @classmethod
    def from_sas(cls, sas: Mapping[str, Any] | None) -> "SasComparison":
        """Build from the raw ``sas`` mapping a verifier attaches to its challenge."""
        if not sas:
            return cls()
        emoji = [(str(symbol), str(name)) for symbol, name in sas.get("emoji") or []]
        decimal = sas.get("decimal")
        return cls(emoji=emoji, decimal=tuple(decimal) if decimal else None)


class QrCodeData(BaseModel):
    """Everything needed to draw a scannable verification code."""

    model_config = ConfigDict(frozen=True)

    keyholder_user_id: str
    request_event_id: str
    other_user_key: str
    secret: str
    keys: list[tuple[str, str]] = Field(description="(key id, key value) pairs, order preserved")

    def to_uri(self, permalink_prefix: str = DEFAULT_PERMALINK_PREFIX) -> str:
        """Encode as the permalink URI scanned by the other device."""
        query = f"?request={quote(self.request_event_id, safe='')}&action=verify"
        for key_id, key in self.keys:
            query += f"&key_{quote(key_id, safe='')}={quote(key, safe='')}"
        query += f"&other_user_key={quote(self.other_user_key, safe='')}"
        query += f"&secret={quote(self.secret, safe='')}"
        return f"{permalink_prefix}{quote(self.keyholder_user_id, safe='')}{query}"


@dataclass
class PanelAction:
    """A button the frontend shows, bound to a controller operation."""

    key: str
    label: str
    handler: Callable[[], Any]
    kind: str = "primary"  # 'primary' or 'danger'


@dataclass
class PanelView:
    """Presentation descriptor chosen by the phase dispatcher."""

    mode: PresentationMode
    title: str
    message: str = ""
    hint: str = ""
    display_name: str = ""
    qr: QrCodeData | None = None
    qr_uri: str | None = None
    sas: SasComparison | None = None
    busy: bool = False
    actions: list[PanelAction] = field(default_factory=list)

    def action(self, key: str) -> PanelAction | None:
        """Look up an action by key."""
        for candidate in self.actions:
            if candidate.key == key:
                return candidate
        return None
