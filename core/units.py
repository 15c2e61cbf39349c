"""
Unit handling for the defect assessment engine.

All stored inputs are metric (mm, MPa). Evaluators convert once, at the start of
a run, into the unit system the caller wants results displayed in.
"""
from enum import Enum

MM_PER_INCH = 25.4
PSI_PER_MPA = 145.038


class UnitSystem(Enum):
    """Output unit system for an assessment run"""
    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def length_unit(self) -> str:
        return "mm" if self is UnitSystem.METRIC else "in"

    @property
    def pressure_unit(self) -> str:
        return "MPa" if self is UnitSystem.METRIC else "psi"

    @property
    def flow_stress_margin(self) -> float:
        """Additive flow stress margin of Modified B31G / RSTRENG (10 ksi)."""
        return 68.95 if self is UnitSystem.METRIC else 10000.0


def length_to_metric(value: float, unit: str) -> float:
    """Convert a length given in `unit` ("mm" or "in") to millimeters."""
    if unit == "mm":
        return value
    if unit == "in":
        return value * MM_PER_INCH
    raise ValueError(f"Unknown length unit: {unit}")


def pressure_to_metric(value: float, unit: str) -> float:
    """Convert a pressure given in `unit` ("MPa" or "psi") to megapascals."""
    if unit == "MPa":
        return value
    if unit == "psi":
        return value / PSI_PER_MPA
    raise ValueError(f"Unknown pressure unit: {unit}")


def length_from_metric(value: float, system: UnitSystem) -> float:
    return value / MM_PER_INCH if system is UnitSystem.IMPERIAL else value


def pressure_from_metric(value: float, system: UnitSystem) -> float:
    return value * PSI_PER_MPA if system is UnitSystem.IMPERIAL else value
