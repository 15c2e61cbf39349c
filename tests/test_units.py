"""
Unit tests for length / pressure conversion and UnitSystem properties
"""

import pytest

from core.units import (
    MM_PER_INCH,
    PSI_PER_MPA,
    UnitSystem,
    length_from_metric,
    length_to_metric,
    pressure_from_metric,
    pressure_to_metric,
)


class TestConversionFactors:
    """1 in = 25.4 mm, 1 MPa = 145.038 psi"""

    def test_inch_to_mm(self):
        assert length_to_metric(1.0, "in") == pytest.approx(25.4)
        assert length_to_metric(24.0, "in") == pytest.approx(609.6)

    def test_mm_is_identity(self):
        assert length_to_metric(12.7, "mm") == 12.7
        assert length_from_metric(12.7, UnitSystem.METRIC) == 12.7

    def test_mm_to_inch(self):
        assert length_from_metric(12.7, UnitSystem.IMPERIAL) == pytest.approx(0.5)

    def test_psi_to_mpa(self):
        assert pressure_to_metric(PSI_PER_MPA, "psi") == pytest.approx(1.0)
        assert pressure_to_metric(8.0, "MPa") == 8.0

    def test_mpa_to_psi(self):
        assert pressure_from_metric(1.0, UnitSystem.IMPERIAL) == pytest.approx(145.038)
        assert pressure_from_metric(359.0, UnitSystem.METRIC) == 359.0

    def test_no_rounding(self):
        """Converter keeps full precision; rounding is for display only"""
        value = length_from_metric(1.0, UnitSystem.IMPERIAL)
        assert value == 1.0 / MM_PER_INCH


class TestUnknownUnits:
    """Bad unit strings are a caller error at the input boundary"""

    def test_unknown_length_unit(self):
        with pytest.raises(ValueError, match="Unknown length unit"):
            length_to_metric(1.0, "ft")

    def test_unknown_pressure_unit(self):
        with pytest.raises(ValueError, match="Unknown pressure unit"):
            pressure_to_metric(1.0, "bar")


class TestUnitSystem:
    def test_metric_labels(self):
        assert UnitSystem.METRIC.length_unit == "mm"
        assert UnitSystem.METRIC.pressure_unit == "MPa"

    def test_imperial_labels(self):
        assert UnitSystem.IMPERIAL.length_unit == "in"
        assert UnitSystem.IMPERIAL.pressure_unit == "psi"

    def test_flow_stress_margin(self):
        """10 ksi expressed in each system"""
        assert UnitSystem.METRIC.flow_stress_margin == 68.95
        assert UnitSystem.IMPERIAL.flow_stress_margin == 10000.0

    def test_lookup_by_value(self):
        assert UnitSystem("imperial") is UnitSystem.IMPERIAL
