import numpy as np
from typing import Dict, Mapping, Sequence

from claimsim.models.schemas import Claim, DEFAULT_PROBABILITIES

ProbabilityMap = Dict[str, float]

def default_probabilities() -> ProbabilityMap:
    return dict(DEFAULT_PROBABILITIES)

def claim_probabilities(
    claims: Sequence[Claim],
    probabilities: Mapping[str, float] | None,
) -> np.ndarray:
    """
    Per-claim payment probability, aligned with `claims`.
    Statuses missing from the map never pay (probability 0).
    Out-of-range values are passed through: the draw comparison
    makes p > 1 always pay and p < 0 never pay.
    """
    lookup = probabilities or {}
    return np.array(
        [float(lookup.get(c.status, 0.0)) for c in claims],
        dtype=float,
    )

def claim_amounts(claims: Sequence[Claim]) -> np.ndarray:
    return np.array([float(c.amount) for c in claims], dtype=float)
