"""
Core functionality for the B31G Assessor: units, value types and input handling.
"""
from .units import (
    UnitSystem,
    length_to_metric,
    length_from_metric,
    pressure_to_metric,
    pressure_from_metric,
)
from .models import (
    AssessmentLevel,
    AssessmentResult,
    DefectProfile,
    PipeSpec,
    ProfilePoint,
    SimpleDefect,
    API5L_GRADES,
    smys_for_grade,
)
from .step_trace import StepTrace
