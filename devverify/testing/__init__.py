"""Test doubles for exercising the verification panel without an engine."""

from .fakes import (
    ALICE_USER_ID,
    BOB_USER_ID,
    DEFAULT_SAS,
    EventEmitter,
    FakeCrossSigningInfo,
    FakeIdentityDirectory,
    FakeSasChallenge,
    FakeVerificationRequest,
    FakeVerifier,
)

__all__ = [
    "ALICE_USER_ID",
    "BOB_USER_ID",
    "DEFAULT_SAS",
    "EventEmitter",
    "FakeCrossSigningInfo",
    "FakeIdentityDirectory",
    "FakeSasChallenge",
    "FakeVerificationRequest",
    "FakeVerifier",
]
