# simulations/cohorts.py

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List

from .common import CohortSpec


@dataclass(frozen=True)
class Cohort:
    """
    Parallel measurement / risk-score arrays for one synthetic population.
    """
    values: List[float]
    scores: List[float]

    def positives(self, threshold: float) -> int:
        return sum(1 for v in self.values if v > threshold)


def generate_cohort(spec: CohortSpec, seed: int) -> Cohort:
    """
    Draw a cohort resembling viral-load monitoring data.

    Each subject fails (is above the threshold) with probability
    spec.prevalence:
      - failures: threshold * 10**(0.01 + |N(0, 1)|), strictly above it
      - suppressed: half undetectable (0), half uniform in
        [0, threshold / 10]

    The risk score is log10(1 + value) plus N(0, score_noise) noise, so
    score_noise = 0 ranks subjects exactly by their value.
    """
    rng = random.Random(seed)
    values: List[float] = []
    scores: List[float] = []

    for _ in range(spec.n):
        if rng.random() < spec.prevalence:
            v = spec.threshold * 10 ** (0.01 + abs(rng.gauss(0.0, 1.0)))
        elif rng.random() < 0.5:
            v = 0.0
        else:
            v = rng.uniform(0.0, spec.threshold / 10.0)

        noise = rng.gauss(0.0, spec.score_noise) if spec.score_noise > 0 else 0.0
        values.append(v)
        scores.append(math.log10(1.0 + v) + noise)

    return Cohort(values=values, scores=scores)
