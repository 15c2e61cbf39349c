"""
Ordered, human-readable log of the intermediate quantities of one assessment.
"""
from typing import List, Tuple


class StepTrace:
    """
    Collects numbered calculation steps while an evaluator runs.

    `add` numbers the line, `detail` indents a sub-line under the last step and
    `warn` records an unnumbered alert. The finished trace is handed to the
    result as an immutable tuple via `steps`.
    """

    def __init__(self):
        self._lines: List[str] = []
        self._count = 0

    def add(self, text: str) -> None:
        self._count += 1
        self._lines.append(f"{self._count}. {text}")

    def detail(self, text: str) -> None:
        self._lines.append(f"   - {text}")

    def warn(self, text: str) -> None:
        self._lines.append(f"!!! {text} !!!")

    def __len__(self):
        return len(self._lines)

    @property
    def steps(self) -> Tuple[str, ...]:
        return tuple(self._lines)
