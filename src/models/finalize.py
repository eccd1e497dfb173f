"""
Finalization result models
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class StepOutcome:
    """
    Outcome of a single finalization step

    Attributes:
        step: Step name (e.g., "assets", "stylesheets", "links", "artifacts")
        ok: False if the step raised; remaining steps still run
        changed: True if the step modified the project on disk
        messages: Human-readable notes for the report
    """
    step: str
    ok: bool = True
    changed: bool = False
    messages: List[str] = field(default_factory=list)


@dataclass
class FinalizeReport:
    """Ordered outcomes of a finalization run"""
    outcomes: List[StepOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def changed(self) -> bool:
        return any(outcome.changed for outcome in self.outcomes)

    def outcome_get(self, step: str) -> StepOutcome:
        for outcome in self.outcomes:
            if outcome.step == step:
                return outcome
        raise KeyError(step)
