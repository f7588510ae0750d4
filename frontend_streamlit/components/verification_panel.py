"""Verification Panel - Renders the view chosen by the panel controller.

Shows the QR code link or emoji comparison, the busy state while the
handshake runs, and the result summary with its acknowledgement button.
"""

import streamlit as st

from devverify.config import TEXT_VERIFY_BY_EMOJI, PresentationMode
from devverify.models import PanelView, SasComparison

# Accent colors per presentation mode
MODE_COLORS = {
    PresentationMode.SCAN_OR_COMPARE: "#1f77b4",
    PresentationMode.EMOJI_ONLY: "#1f77b4",
    PresentationMode.COMPARE_EMOJI: "#6B2D8B",
    PresentationMode.AWAITING_PARTNER: "#6B2D8B",
    PresentationMode.VERIFIED: "#4CAF50",
    PresentationMode.CANCELLED: "#F44336",
}


def render_sas_emoji(sas: SasComparison) -> None:
    """Render the emoji sequence as a row of labelled symbols."""
    if not sas.emoji:
        if sas.decimal:
            st.markdown(" ".join(str(n) for n in sas.decimal))
        return

    columns = st.columns(len(sas.emoji))
    for column, (symbol, name) in zip(columns, sas.emoji):
        column.markdown(
            f'<div style="text-align: center;">'
            f'<div style="font-size: 32px;">{symbol}</div>'
            f'<div style="font-size: 11px; color: #666;">{name}</div>'
            f"</div>",
            unsafe_allow_html=True,
        )


def render_verification_panel(view: PanelView | None, key_prefix: str = "verification") -> None:
    """Render a panel view.

    Args:
        view: View from VerificationPanelController.render(); None renders nothing
        key_prefix: Prefix for widget keys when several panels share a page
    """
    if view is None:
        return

    color = MODE_COLORS.get(view.mode, "#999")
    st.markdown(
        f'<div style="border-left: 3px solid {color}; padding: 4px 12px; margin-bottom: 8px;">'
        f'<span style="font-size: 18px; font-weight: 600;">{view.title}</span>'
        f"</div>",
        unsafe_allow_html=True,
    )

    if view.message:
        st.markdown(view.message)

    if view.qr_uri:
        st.code(view.qr_uri, language=None)
        if view.hint:
            st.markdown(f"**{TEXT_VERIFY_BY_EMOJI}**")
            st.caption(view.hint)
    elif view.hint:
        st.caption(view.hint)

    if view.sas is not None:
        render_sas_emoji(view.sas)

    if view.busy:
        st.info("Waiting for the other device…")

    for action in view.actions:
        if st.button(
            action.label,
            key=f"{key_prefix}_{action.key}",
            type="primary" if action.kind == "primary" else "secondary",
            use_container_width=True,
        ):
            action.handler()
