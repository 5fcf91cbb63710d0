import math
import numpy as np
from typing import List, Mapping, Sequence

from claimsim.core.probabilities import claim_amounts, claim_probabilities
from claimsim.models.schemas import (
    Claim,
    DistributionBucket,
    Percentiles,
    SimulationSummary,
)

DEFAULT_ITERATIONS = 2000
HISTOGRAM_STEPS = 10
PERCENTILES = {"p25": 0.25, "p50": 0.50, "p75": 0.75, "p95": 0.95}
# Upper bound on draws held at once (rows x claims)
CHUNK_CELLS = 1_000_000


class InvalidIterationCount(ValueError):
    def __init__(self, iterations: int):
        super().__init__(f"iterations must be a positive integer, got {iterations!r}")
        self.iterations = iterations


def check_iterations(iterations: int) -> None:
    if isinstance(iterations, bool) or not isinstance(iterations, (int, np.integer)) or iterations <= 0:
        raise InvalidIterationCount(iterations)


def chunk_rows(n_claims: int) -> int:
    return max(1, CHUNK_CELLS // max(n_claims, 1))


def simulate_outcomes(
    claims: Sequence[Claim],
    probabilities: Mapping[str, float] | None,
    iterations: int = DEFAULT_ITERATIONS,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> np.ndarray:
    """
    One trial per iteration: each claim pays its full amount when an
    independent uniform draw in [0, 1) falls below its status probability.
    Returns the trial totals sorted ascending.
    """
    check_iterations(iterations)
    if rng is None:
        rng = np.random.default_rng(seed)

    amounts = claim_amounts(claims)
    p = claim_probabilities(claims, probabilities)

    n = int(iterations)
    outcomes = np.zeros(n)
    rows = chunk_rows(amounts.size)

    # At most CHUNK_CELLS draws are alive at once
    for start in range(0, n, rows):
        stop = min(start + rows, n)
        # 1) Draws: one row per trial, one column per claim
        draws = rng.random((stop - start, amounts.size))
        # 2) Paid mask -> trial totals
        outcomes[start:stop] = np.where(draws < p, amounts, 0.0).sum(axis=1)

    outcomes.sort()
    return outcomes


def _nearest_rank(outcomes: np.ndarray, fraction: float) -> float:
    n = outcomes.size
    # floor(n * X) reaches n for small n at X=0.95; clamp to the last index
    idx = min(math.floor(n * fraction), n - 1)
    return float(outcomes[idx])


def _distribution(outcomes: np.ndarray, lo: float, hi: float) -> List[DistributionBucket]:
    step = (hi - lo) / HISTOGRAM_STEPS
    if step == 0:
        return [DistributionBucket(value=lo, count=int(outcomes.size))]

    # Buckets are keyed on floor(v / step) * step, so up to 11 can appear
    keys, counts = np.unique(np.floor(outcomes / step), return_counts=True)
    return [
        DistributionBucket(value=float(k * step), count=int(c))
        for k, c in zip(keys, counts)
    ]


def summarize_outcomes(outcomes: np.ndarray) -> SimulationSummary:
    """Headline statistics and histogram for sorted trial totals."""
    if outcomes.size == 0:
        raise InvalidIterationCount(0)

    lo = float(outcomes[0])
    hi = float(outcomes[-1])
    # Mean of identical floats can drift by an ulp; keep it inside [min, max]
    mean = float(np.clip(outcomes.mean(), lo, hi))

    return SimulationSummary(
        expected_revenue=mean,
        min_revenue=lo,
        max_revenue=hi,
        percentiles=Percentiles(
            **{name: _nearest_rank(outcomes, x) for name, x in PERCENTILES.items()}
        ),
        distribution=_distribution(outcomes, lo, hi),
    )


def simulate_revenue(
    claims: Sequence[Claim],
    probabilities: Mapping[str, float] | None,
    iterations: int = DEFAULT_ITERATIONS,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
) -> SimulationSummary:
    """
    Monte Carlo estimate of collected revenue for a claim set.
    Raises InvalidIterationCount when iterations <= 0.
    """
    outcomes = simulate_outcomes(claims, probabilities, iterations, rng=rng, seed=seed)
    return summarize_outcomes(outcomes)
