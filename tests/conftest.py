"""
Shared fixtures: the example pipeline used throughout the B31G test suite.
"""
import pytest

from core.models import DefectProfile, PipeSpec, SimpleDefect


@pytest.fixture
def x52_pipe():
    """24 in X52 line: D=610 mm, t=12.7 mm, SMYS=359 MPa, MAOP=8.0 MPa, F=0.72"""
    return PipeSpec(outer_diameter=610.0, wall_thickness=12.7, smys=359.0, maop=8.0, design_factor=0.72)


@pytest.fixture
def short_defect():
    return SimpleDefect(length=200.0, depth=5.0)


@pytest.fixture
def long_defect():
    return SimpleDefect(length=400.0, depth=5.0)


@pytest.fixture
def example_profile():
    return DefectProfile.from_pairs([(0, 0), (50, 2.5), (100, 6.2), (150, 4.1), (200, 0)])
