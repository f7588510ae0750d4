"""Shared test fixtures and helpers.

Centralizes the fake engine, directory and controller wiring used across
the panel test modules.
"""

from unittest import mock

import pytest

from devverify.config import PanelConfig
from devverify.models import Member
from devverify.panel import VerificationPanelController
from devverify.testing import (
    ALICE_USER_ID,
    BOB_USER_ID,
    FakeIdentityDirectory,
    FakeVerificationRequest,
)


@pytest.fixture
def member():
    """The other party of the verification."""
    return Member(user_id=BOB_USER_ID, display_name="Bob")


@pytest.fixture
def request_handle():
    """A fake verification request in the READY phase."""
    return FakeVerificationRequest(other_user_id=BOB_USER_ID)


@pytest.fixture
def directory():
    """A directory with complete key material for QR codes."""
    return FakeIdentityDirectory(user_id=ALICE_USER_ID)


@pytest.fixture
def on_close():
    return mock.MagicMock(name="on_close")


@pytest.fixture
def make_controller(request_handle, member, directory, on_close):
    """Factory building a controller around the shared fakes."""

    def _make(**overrides) -> VerificationPanelController:
        kwargs = {
            "request": request_handle,
            "member": member,
            "directory": directory,
            "on_close": on_close,
            "config": PanelConfig(),
        }
        kwargs.update(overrides)
        return VerificationPanelController(**kwargs)

    return _make
