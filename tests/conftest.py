"""Pytest configuration and fixtures."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from claimsim.models.schemas import Claim, SimulationRequest


@pytest.fixture
def scenario_claims() -> list[Claim]:
    """One approved claim that always pays and one denied claim that never does."""
    return [
        Claim(id="c1", amount=100.0, status="Approved"),
        Claim(id="c2", amount=200.0, status="Denied"),
    ]


@pytest.fixture
def scenario_request(scenario_claims) -> SimulationRequest:
    return SimulationRequest(
        claims=scenario_claims,
        probabilities={"Approved": 1.0, "Denied": 0.0},
        iterations=500,
    )


@pytest.fixture
def mixed_claims() -> list[Claim]:
    return [
        Claim(id="m1", amount=1675.50, status="Pending"),
        Claim(id="m2", amount=2310.09, status="Approved"),
        Claim(id="m3", amount=4945.57, status="Pending"),
        Claim(id="m4", amount=8338.89, status="Denied"),
        Claim(id="m5", amount=3220.05, status="Denied"),
    ]


@pytest.fixture
def thread_factory():
    return lambda: ThreadPoolExecutor(max_workers=2)
