"""QR code payloads for scan-based device verification."""

from .payload import QrInputs, assemble_qr_payload, build_qr_code, collect_qr_inputs

__all__ = [
    "QrInputs",
    "assemble_qr_payload",
    "build_qr_code",
    "collect_qr_inputs",
]
