"""Core package types used across pipeline stages."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

BUCKET_LABELS = ("depression", "storm", "hurricane", "major_hurricane")


@dataclass(frozen=True)
class WindThresholds:
    """Sustained-wind cutoffs in knots; each is the inclusive lower bound of its category."""

    named_storm: float = 33.89
    hurricane: float = 64.30
    major_hurricane: float = 96.46

    def buckets(self) -> list[tuple[str, float, float]]:
        """Half-open `[lo, hi)` ranges for the four step categories."""

        edges = [0.0, self.named_storm, self.hurricane, self.major_hurricane, math.inf]
        return [(label, edges[i], edges[i + 1]) for i, label in enumerate(BUCKET_LABELS)]

    def as_dict(self) -> dict[str, float]:
        return {
            "named_storm": float(self.named_storm),
            "hurricane": float(self.hurricane),
            "major_hurricane": float(self.major_hurricane),
        }


@dataclass(frozen=True)
class ValidationIssue:
    level: str
    code: str
    message: str
    context: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    issues: Sequence[ValidationIssue]
    n_rows: int
    n_storms: int
