"""
Main module for the B31G Assessor Streamlit application.

Run with: streamlit run app/main.py
"""
import streamlit as st

from app.views import render_assessment_view


def run_app():
    """Main function to run the B31G defect assessment Streamlit application."""

    st.set_page_config(
        page_title="ASME B31G Assessor - Pipeline Defect Evaluation",
        page_icon="🔧",
        layout="wide",
        initial_sidebar_state="collapsed",
        menu_items={
            'Get Help': None,
            'Report a bug': None,
            'About': "ASME B31G remaining-strength assessment (Original, Modified, RSTRENG)"
        }
    )

    st.title("ASME B31G Assessor")
    st.caption("Pipeline Defect Evaluation")

    render_assessment_view()

if __name__ == "__main__":
    run_app()
