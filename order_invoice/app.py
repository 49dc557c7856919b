"""
Streamlit UI for Order Invoice

Upload a Shopify order PDF, adjust the billed-to details, preview the
GST tax invoice and download it.
Run with: streamlit run order_invoice/app.py
"""

import os

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from order_invoice.config import InvoiceSettings, load_settings
from order_invoice.exceptions import InvoiceError
from order_invoice.pipeline import InvoicePipeline
from order_invoice.render import BillingDetails, HTMLInvoiceRenderer


# Page configuration
st.set_page_config(
    page_title="Order Invoice",
    page_icon="🧾",
    layout="wide",
)


@st.cache_resource
def load_app_settings() -> InvoiceSettings:
    """Load settings from $ORDER_INVOICE_CONFIG, or use defaults."""
    config_path = os.environ.get('ORDER_INVOICE_CONFIG') or None
    return load_settings(config_path)


def main():
    """Main Streamlit app."""
    st.title("🧾 Order Invoice")
    st.caption("Turn a Shopify order PDF into a GST tax invoice")

    try:
        settings = load_app_settings()
    except InvoiceError as e:
        st.error(f"❌ {e}")
        return

    uploaded = st.file_uploader("Upload order PDF", type=['pdf'])
    if uploaded is None:
        st.info("Upload an order to begin")
        return

    # Each upload gets its own pipeline pass; nothing is shared between runs
    try:
        result = InvoicePipeline(settings).process_upload(uploaded.getvalue(), uploaded.name)
    except InvoiceError as e:
        st.error(f"❌ {e}")
        return

    record = result.record

    col1, col2 = st.columns([1, 2])

    with col1:
        st.subheader("📋 Extracted Order")
        st.dataframe(
            pd.DataFrame(
                [{'Field': k, 'Value': str(v)} for k, v in record.to_dict().items()]
            ),
            hide_index=True,
            use_container_width=True,
        )

        if result.warnings:
            with st.expander(f"⚠️ Warnings ({len(result.warnings)})"):
                for w in result.warnings:
                    st.warning(w)

        st.subheader("👤 Billed To")
        default_email = '' if record.email == settings.extraction.no_email_text else record.email
        billing = BillingDetails(
            company_name=st.text_input("Company name", value=''),
            contact_name=st.text_input("Contact name", value=record.customer_name),
            email=st.text_input("Email", value=default_email),
        )

    renderer = HTMLInvoiceRenderer(settings)
    page = renderer.render(record, billing)

    with col2:
        st.subheader("🖨️ Preview")
        components.html(page, height=700, scrolling=True)

        st.download_button(
            "💾 Download Invoice",
            data=page,
            file_name=f"{renderer.document_name(record)}.html",
            mime="text/html",
            type="primary",
        )


if __name__ == "__main__":
    main()
