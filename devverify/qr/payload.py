"""QR payload assembly for scan-based verification.

The payload is a pure function of the local session's keys, the other
user's master cross-signing key, the request event id and the shared
secret. It is recomputed on every render and never cached.
"""

import logging
from dataclasses import dataclass

from devverify.engine import IdentityDirectory, VerificationRequest
from devverify.models import QrCodeData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QrInputs:
    """Inputs required to assemble a QR payload, all present."""

    keyholder_user_id: str
    device_id: str
    device_key: str
    cross_signing_id: str
    other_user_master_key: str
    request_event_id: str
    shared_secret: str


def assemble_qr_payload(
    keyholder_user_id: str,
    device_id: str,
    device_key: str,
    cross_signing_id: str,
    other_user_master_key: str,
    request_event_id: str,
    shared_secret: str,
) -> QrCodeData:
    """Assemble the ordered key list, secret and event id for a QR code.

    Args:
        keyholder_user_id: Local user id (owner of the keys in the code)
        device_id: Local device id
        device_key: Local device ed25519 public key
        cross_signing_id: Local cross-signing public key
        other_user_master_key: Other user's master cross-signing key id
        request_event_id: Id of the event that originated the request
        shared_secret: Secret derived by the engine for this request

    Returns:
        QrCodeData with keys ``[(device_id, device_key), (xsign, xsign)]``

    Raises:
        ValueError: If any input is missing
    """
    inputs = {
        "keyholder_user_id": keyholder_user_id,
        "device_id": device_id,
        "device_key": device_key,
        "cross_signing_id": cross_signing_id,
        "other_user_master_key": other_user_master_key,
        "request_event_id": request_event_id,
        "shared_secret": shared_secret,
    }
    missing = [name for name, value in inputs.items() if not value]
    if missing:
        raise ValueError(f"Cannot assemble QR payload, missing: {', '.join(missing)}")

    return QrCodeData(
        keyholder_user_id=keyholder_user_id,
        request_event_id=request_event_id,
        other_user_key=other_user_master_key,
        secret=shared_secret,
        keys=[
            (device_id, device_key),
            (cross_signing_id, cross_signing_id),
        ],
    )


def collect_qr_inputs(
    request: VerificationRequest,
    directory: IdentityDirectory,
) -> QrInputs | None:
    """Gather QR inputs from the request and the identity directory.

    Returns None when any piece of key material or the originating event is
    unavailable, in which case the panel offers emoji verification only.
    """
    cross_signing_info = directory.get_stored_cross_signing_for_user(request.other_user_id)
    if cross_signing_info is None:
        logger.debug(f"No stored cross-signing keys for {request.other_user_id}")
        return None

    request_event = request.request_event
    request_event_id = request_event.event_id if request_event is not None else None

    values = {
        "keyholder_user_id": directory.get_user_id(),
        "device_id": directory.get_device_id(),
        "device_key": directory.get_device_ed25519_key(),
        "cross_signing_id": directory.get_cross_signing_id(),
        "other_user_master_key": cross_signing_info.get_id("master"),
        "request_event_id": request_event_id,
        "shared_secret": request.encoded_shared_secret,
    }
    missing = [name for name, value in values.items() if not value]
    if missing:
        logger.debug(f"QR code unavailable, missing: {', '.join(missing)}")
        return None

    return QrInputs(**values)


def build_qr_code(request: VerificationRequest, directory: IdentityDirectory) -> QrCodeData | None:
    """Collect inputs and assemble the payload, or None if inputs are incomplete."""
    inputs = collect_qr_inputs(request, directory)
    if inputs is None:
        return None
    return assemble_qr_payload(
        keyholder_user_id=inputs.keyholder_user_id,
        device_id=inputs.device_id,
        device_key=inputs.device_key,
        cross_signing_id=inputs.cross_signing_id,
        other_user_master_key=inputs.other_user_master_key,
        request_event_id=inputs.request_event_id,
        shared_secret=inputs.shared_secret,
    )
