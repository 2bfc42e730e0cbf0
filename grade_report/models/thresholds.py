from __future__ import annotations

from dataclasses import dataclass

"""ThresholdSet model for the grade report generator.

A ThresholdSet holds the three user-adjustable cutoffs that drive the dynamic
Passing / Merit / Distinction rates. Instances are only trusted once they have
passed through services.thresholds.normalize().
"""

__all__ = [
    "DEFAULT_PASSING",
    "DEFAULT_MERIT",
    "DEFAULT_DISTINCTION",
    "ThresholdSet",
]

DEFAULT_PASSING = 40.0
DEFAULT_MERIT = 60.0
DEFAULT_DISTINCTION = 70.0


@dataclass(frozen=True)
class ThresholdSet:
    """Ordered grade cutoffs, each within [0, 100].

    Invariant (enforced by normalize): passing <= merit <= distinction.
    """
    passing: float = DEFAULT_PASSING
    merit: float = DEFAULT_MERIT
    distinction: float = DEFAULT_DISTINCTION

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.passing, self.merit, self.distinction)
