"""
Views for the B31G Assessor application.
"""
from .assessment import render_assessment_view
