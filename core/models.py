"""
Value types passed between the input side, the evaluators and the presentation side.

Inputs (PipeSpec, SimpleDefect, DefectProfile) hold metric values (mm, MPa).
AssessmentResult holds values in the unit system of the run that produced it.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple

from core.units import UnitSystem, length_to_metric, pressure_to_metric


class AssessmentLevel(Enum):
    """Supported B31G assessment levels"""
    LEVEL_0 = 0  # Original B31G
    LEVEL_1 = 1  # Modified B31G (0.85dL)
    LEVEL_2 = 2  # RSTRENG effective area

    @property
    def title(self) -> str:
        return {
            AssessmentLevel.LEVEL_0: "Original B31G (Level 0)",
            AssessmentLevel.LEVEL_1: "Modified B31G (Level 1)",
            AssessmentLevel.LEVEL_2: "RSTRENG Effective Area (Level 2)",
        }[self]


# API 5L SMYS by grade: (MPa, psi)
API5L_GRADES = {
    "Grade A": (207, 30000),
    "Grade B": (241, 35000),
    "X42": (290, 42000),
    "X46": (317, 46000),
    "X52": (359, 52000),
    "X56": (386, 56000),
    "X60": (414, 60000),
    "X65": (448, 65000),
    "X70": (483, 70000),
    "X80": (552, 80000),
}


def smys_for_grade(grade: str, system: UnitSystem = UnitSystem.METRIC) -> float:
    """
    Tabulated SMYS of an API 5L grade.

    The imperial value is the published psi figure, not a converted MPa value.
    """
    if grade not in API5L_GRADES:
        raise ValueError(f"Unknown API 5L grade: {grade}")
    metric, imperial = API5L_GRADES[grade]
    return float(metric if system is UnitSystem.METRIC else imperial)


@dataclass(frozen=True)
class PipeSpec:
    """Pipe geometry, material and operating data (mm, MPa)"""
    outer_diameter: Optional[float]
    wall_thickness: Optional[float]
    smys: Optional[float]
    maop: Optional[float]
    design_factor: Optional[float]

    @classmethod
    def from_units(cls, outer_diameter, wall_thickness, smys, maop, design_factor,
                   length_unit: str = "mm", pressure_unit: str = "MPa",
                   diameter_unit: Optional[str] = None, thickness_unit: Optional[str] = None,
                   smys_unit: Optional[str] = None, maop_unit: Optional[str] = None) -> "PipeSpec":
        """
        Build a PipeSpec from caller values in arbitrary units.

        `length_unit` / `pressure_unit` apply to every field unless a per-field
        unit is given. Absent values stay absent.
        """
        def _len(value, unit):
            return None if value is None else length_to_metric(value, unit or length_unit)

        def _press(value, unit):
            return None if value is None else pressure_to_metric(value, unit or pressure_unit)

        return cls(
            outer_diameter=_len(outer_diameter, diameter_unit),
            wall_thickness=_len(wall_thickness, thickness_unit),
            smys=_press(smys, smys_unit),
            maop=_press(maop, maop_unit),
            design_factor=design_factor,
        )


@dataclass(frozen=True)
class SimpleDefect:
    """Single length/depth defect for Level 0 and Level 1 (mm)"""
    length: Optional[float]
    depth: Optional[float]

    @classmethod
    def from_units(cls, length, depth, length_unit: str = "mm",
                   depth_unit: Optional[str] = None) -> "SimpleDefect":
        return cls(
            length=None if length is None else length_to_metric(length, length_unit),
            depth=None if depth is None else length_to_metric(depth, depth_unit or length_unit),
        )


@dataclass(frozen=True)
class ProfilePoint:
    distance: float  # axial position (mm)
    depth: float     # metal loss depth at this station (mm)


@dataclass(frozen=True)
class DefectProfile:
    """River-bottom profile of a corrosion patch (mm)"""
    points: Tuple[ProfilePoint, ...] = ()

    def __post_init__(self):
        # accept any iterable but always store a tuple
        object.__setattr__(self, "points", tuple(self.points))

    def __len__(self):
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def sorted(self) -> "DefectProfile":
        """Copy ordered ascending by distance; equal distances keep caller order."""
        return DefectProfile(tuple(sorted(self.points, key=lambda p: p.distance)))

    @property
    def max_depth(self) -> float:
        return max((p.depth for p in self.points), default=0.0)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[float, float]]) -> "DefectProfile":
        return cls(tuple(ProfilePoint(float(x), float(d)) for x, d in pairs))

    @classmethod
    def from_units(cls, pairs: Iterable[Tuple[float, float]], distance_unit: str = "mm",
                   depth_unit: str = "mm") -> "DefectProfile":
        return cls(tuple(
            ProfilePoint(length_to_metric(float(x), distance_unit), length_to_metric(float(d), depth_unit))
            for x, d in pairs
        ))


@dataclass(frozen=True)
class AssessmentResult:
    """
    Outcome of one evaluator run, in the unit system of that run.

    Level 0/1 fill z_parameter and folias_factor; Level 2 fills the critical
    interval fields instead.
    """
    level: AssessmentLevel
    unit_system: UnitSystem
    flow_stress: float
    failure_pressure: float
    safe_pressure: float
    erf: float
    max_depth: float
    wall_thickness: float
    steps: Tuple[str, ...] = field(default_factory=tuple)
    z_parameter: Optional[float] = None
    folias_factor: Optional[float] = None
    critical_length: Optional[float] = None
    critical_area: Optional[float] = None
    critical_interval: Optional[Tuple[float, float]] = None
    through_wall_intervals: int = 0
    leak: bool = False

    @property
    def depth_over_thickness(self) -> float:
        return self.max_depth / self.wall_thickness
