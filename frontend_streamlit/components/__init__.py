"""UI components for the Streamlit frontend.

This module provides reusable UI components:
- verification_panel: Renders the device verification panel views
"""

from frontend_streamlit.components.verification_panel import (
    render_sas_emoji,
    render_verification_panel,
)

__all__ = [
    "render_sas_emoji",
    "render_verification_panel",
]
