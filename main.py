# main.py

"""Streamlit demo UI for locked previews.

Upload an image and paste a JSON record to see the degraded preview a
viewer without access would receive.
"""

import json
import logging

import streamlit as st

from locked_preview.core.domain import BlurParameters, clamp_ratio
from locked_preview.logging_config import configure_logging
from locked_preview.service.config import settings
from locked_preview.service.pipeline import lock_image, lock_record

configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


def main():
    """Run the Streamlit application UI.

    Collects blur parameters from the sidebar, then renders the locked
    image and the locked record next to their sources.
    """
    st.set_page_config(layout="wide", page_title="Locked Preview", page_icon="🔒")

    st.title("Locked Preview")
    st.markdown(
        "Generate the partially blurred image and the placeholder record shown in place of paywalled content."
    )
    st.markdown("---")

    with st.sidebar:
        st.header("Blur Parameters")
        params = BlurParameters(
            blur_radius=st.slider(
                "Blur radius", 1.0, 40.0, min(max(settings.blur_radius, 1.0), 40.0)
            ),
            visible_ratio=st.slider(
                "Visible ratio", 0.0, 1.0, clamp_ratio(settings.visible_ratio)
            ),
            fade_ratio=st.slider(
                "Fade ratio", 0.0, 1.0, clamp_ratio(settings.fade_ratio)
            ),
            highlight_opacity=st.slider(
                "Highlight opacity", 0.0, 1.0, settings.highlight_opacity
            ),
        )

    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Image")
        upload = st.file_uploader("Source image", type=["png", "jpg", "jpeg", "webp"])

        if upload is not None:
            source = upload.getvalue()
            logger.info("Processing image", extra={"byte_length": len(source)})
            locked = lock_image(source, params)

            if locked is source:
                st.warning("Preview could not be generated; showing the original.")
            st.image(locked, caption="Locked preview")

    with col2:
        st.subheader("Record")
        text_input = st.text_area(
            "Source record (JSON)", height=300, placeholder='{"title": "My Resume"}'
        )

        if st.button("Lock record", type="primary"):
            if not text_input or not text_input.strip():
                st.warning("Please enter a JSON record.")
                logger.warning("Record preview attempted with empty input")

            else:
                try:
                    record = json.loads(text_input)
                except json.JSONDecodeError as e:
                    st.error(f"Invalid JSON: {e}")
                    logger.warning("Record preview attempted with invalid JSON")
                else:
                    st.json(lock_record(record))


if __name__ == "__main__":
    main()
