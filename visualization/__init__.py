"""
Visualization modules for the B31G Assessor.
"""
from .profile_viz import create_profile_visualization
