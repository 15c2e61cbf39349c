"""
Single entry point that runs the evaluator for a chosen assessment level and
classifies the outcome.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from analysis.acceptance import Verdict, classify
from analysis.ffs_calculations import evaluate_level0, evaluate_level1, evaluate_level2
from core.models import AssessmentLevel, AssessmentResult, DefectProfile, PipeSpec, SimpleDefect
from core.units import UnitSystem


@dataclass(frozen=True)
class AssessmentParams:
    """Parameters for a defect assessment"""
    level: AssessmentLevel
    pipe: PipeSpec
    unit_system: UnitSystem = UnitSystem.METRIC


class DefectAssessor:
    """
    Evaluate defects at one B31G level for one pipe.
    """

    def __init__(self, params: AssessmentParams):
        self.params = params

    def assess(self, defect: Union[SimpleDefect, DefectProfile]
               ) -> Tuple[Optional[AssessmentResult], Optional[Verdict]]:
        """
        Run the level's evaluator on a defect.

        Parameters:
        - defect: SimpleDefect for Level 0/1, DefectProfile for Level 2

        Returns:
        - (result, verdict); both None when the inputs give no result
        """
        result = self.evaluate(defect)
        return result, classify(result)

    def evaluate(self, defect: Union[SimpleDefect, DefectProfile]) -> Optional[AssessmentResult]:
        level = self.params.level
        if level is AssessmentLevel.LEVEL_0:
            return self._evaluate_simple(evaluate_level0, defect)
        elif level is AssessmentLevel.LEVEL_1:
            return self._evaluate_simple(evaluate_level1, defect)
        elif level is AssessmentLevel.LEVEL_2:
            if not isinstance(defect, DefectProfile):
                raise ValueError("Level 2 assessment requires a DefectProfile")
            return evaluate_level2(self.params.pipe, defect, self.params.unit_system)
        else:
            raise ValueError(f"Unknown assessment level: {level}")

    def _evaluate_simple(self, evaluator, defect):
        if not isinstance(defect, SimpleDefect):
            raise ValueError(f"{self.params.level.title} requires a SimpleDefect")
        return evaluator(self.params.pipe, defect, self.params.unit_system)


def assess_defect(level: AssessmentLevel, pipe: PipeSpec,
                  defect: Union[SimpleDefect, DefectProfile],
                  unit_system: UnitSystem = UnitSystem.METRIC):
    """Shorthand for DefectAssessor(AssessmentParams(...)).assess(defect)."""
    return DefectAssessor(AssessmentParams(level, pipe, unit_system)).assess(defect)
