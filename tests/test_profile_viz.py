"""
Tests for the river-bottom profile figure
"""

import pytest

from analysis.ffs_calculations import evaluate_level1, evaluate_level2
from core.models import DefectProfile
from core.units import UnitSystem
from visualization.profile_viz import create_profile_visualization


class TestProfileVisualization:
    def test_profile_only(self, example_profile):
        fig = create_profile_visualization(example_profile)
        assert len(fig.data) == 1
        assert list(fig.data[0].y) == [0, -2.5, -6.2, -4.1, 0]
        assert len(fig.layout.shapes) == 0

    def test_points_plotted_in_distance_order(self):
        profile = DefectProfile.from_pairs([(100, 1.0), (0, 2.0), (50, 3.0)])
        fig = create_profile_visualization(profile)
        assert list(fig.data[0].x) == [0.0, 50.0, 100.0]

    def test_level2_result_adds_limits_and_interval(self, x52_pipe, example_profile):
        result = evaluate_level2(x52_pipe, example_profile)
        fig = create_profile_visualization(example_profile, result)
        assert len(fig.layout.shapes) == 3
        x0, x1 = result.critical_interval
        rect = fig.layout.shapes[2]
        assert (rect.x0, rect.x1) == (x0, x1)

    def test_wall_lines(self, x52_pipe, example_profile):
        result = evaluate_level2(x52_pipe, example_profile)
        fig = create_profile_visualization(example_profile, result)
        assert fig.layout.shapes[0].y0 == pytest.approx(-12.7)
        assert fig.layout.shapes[1].y0 == pytest.approx(-0.8 * 12.7)

    def test_result_without_interval(self, x52_pipe, short_defect, example_profile):
        result = evaluate_level1(x52_pipe, short_defect)
        fig = create_profile_visualization(example_profile, result)
        assert len(fig.layout.shapes) == 2

    def test_units_follow_result(self, x52_pipe, example_profile):
        result = evaluate_level2(x52_pipe, example_profile, UnitSystem.IMPERIAL)
        fig = create_profile_visualization(example_profile, result)
        assert fig.data[0].x[-1] == pytest.approx(200.0 / 25.4)
        assert fig.layout.xaxis.title.text == "Axial Distance (in)"

    def test_empty_profile(self):
        fig = create_profile_visualization(DefectProfile())
        assert len(fig.data) == 0
        assert fig.layout.annotations[0].text == "No profile points to display"
