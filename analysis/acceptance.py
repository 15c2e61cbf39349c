"""
Acceptance classification of an assessed defect.
"""
from enum import Enum
from typing import Optional

from core.models import AssessmentResult

# B31G absolute depth limit, as a fraction of wall thickness
MAX_DEPTH_FRACTION = 0.8


class Verdict(Enum):
    """Acceptance verdict, in precedence order leak > depth > pressure"""
    LEAK = "unacceptable: leak"
    DEPTH_EXCEEDED = "unacceptable: depth exceeds 80% of wall thickness"
    ACCEPTABLE = "acceptable"
    PRESSURE_INSUFFICIENT = "unacceptable: pressure margin insufficient"

    @property
    def is_acceptable(self) -> bool:
        return self is Verdict.ACCEPTABLE

    @property
    def severity(self) -> str:
        """Visual tier for presentation: 'safe', 'warning' or 'danger'."""
        if self is Verdict.ACCEPTABLE:
            return "safe"
        if self is Verdict.DEPTH_EXCEEDED:
            return "warning"
        return "danger"

    @property
    def headline(self) -> str:
        return {
            Verdict.LEAK: "Unacceptable: Leak Detected",
            Verdict.DEPTH_EXCEEDED: "Unacceptable: Depth > 80% WT",
            Verdict.ACCEPTABLE: "Defect is Acceptable",
            Verdict.PRESSURE_INSUFFICIENT: "Defect is Unacceptable",
        }[self]

    @property
    def explanation(self) -> str:
        return {
            Verdict.LEAK: "Maximum defect depth exceeds or equals wall thickness.",
            Verdict.DEPTH_EXCEEDED: ("ASME B31G requires repair or replacement for defects deeper "
                                     "than 80% of wall thickness regardless of length."),
            Verdict.ACCEPTABLE: "Safe Operating Pressure exceeds MAOP (ERF ≤ 1.0).",
            Verdict.PRESSURE_INSUFFICIENT: "Safe Operating Pressure is below MAOP (ERF > 1.0).",
        }[self]


def classify_values(erf: float, max_depth: float, wall_thickness: float) -> Verdict:
    """
    Verdict from ERF, maximum depth and wall thickness (depth and thickness in
    the same unit). An infinite ERF is never acceptable.
    """
    if max_depth >= wall_thickness:
        return Verdict.LEAK
    if max_depth > MAX_DEPTH_FRACTION * wall_thickness:
        return Verdict.DEPTH_EXCEEDED
    if erf <= 1.0:
        return Verdict.ACCEPTABLE
    return Verdict.PRESSURE_INSUFFICIENT


def classify(result: Optional[AssessmentResult], wall_thickness: Optional[float] = None) -> Optional[Verdict]:
    """
    Classify an evaluator result.

    `wall_thickness` must be in the result's unit system; it defaults to the
    thickness the result was computed with. No result gives no verdict.
    """
    if result is None:
        return None
    t = result.wall_thickness if wall_thickness is None else wall_thickness
    return classify_values(result.erf, result.max_depth, t)
