"""devverify - presentation controller for interactive device verification."""

from devverify.config import PanelConfig, Phase, PresentationMode, VerificationMethod
from devverify.models import Member, PanelAction, PanelView, QrCodeData, SasComparison
from devverify.panel import VerificationPanelController

__all__ = [
    "Member",
    "PanelAction",
    "PanelConfig",
    "PanelView",
    "Phase",
    "PresentationMode",
    "QrCodeData",
    "SasComparison",
    "VerificationMethod",
    "VerificationPanelController",
]
