import logging
import os
import time

from claimsim.core.simulate import simulate_revenue
from claimsim.models.schemas import SimulationRequest, SimulationSummary

logger = logging.getLogger(__name__)


def run_request(request: SimulationRequest) -> SimulationSummary:
    """
    Entry point for one execution unit.

    The request arrives by value (pickled into a worker process, or a deep
    copy on the thread/inline paths) and the summary is returned by value.
    Nothing here touches host state.
    """
    started = time.perf_counter()
    summary = simulate_revenue(
        claims=request.claims,
        probabilities=request.probabilities,
        iterations=request.iterations,
        seed=request.seed,
    )
    logger.debug(
        "Simulated %d claims x %d iterations in %.1f ms (pid=%d)",
        len(request.claims),
        request.iterations,
        (time.perf_counter() - started) * 1000,
        os.getpid(),
    )
    return summary
