from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional, Dict, List

MAX_ITERATIONS = 500_000

DEFAULT_PROBABILITIES: Dict[str, float] = {
    "Approved": 0.95,
    "Pending": 0.60,
    "Denied": 0.10,
}

class Claim(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    amount: float = Field(ge=0, allow_inf_nan=False)
    # Usually Pending / Approved / Denied, but any label is accepted
    status: str
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    billing_code: Optional[str] = None
    insurance_provider: Optional[str] = None
    claim_date: Optional[str] = None

class SimulationRequest(BaseModel):
    claims: List[Claim] = Field(default_factory=list)
    probabilities: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_PROBABILITIES))
    # Range is checked by the engine (InvalidIterationCount), not here
    iterations: int = 2000
    seed: Optional[int] = None

class Percentiles(BaseModel):
    model_config = ConfigDict(frozen=True)

    p25: float
    p50: float
    p75: float
    p95: float

class DistributionBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float
    count: int

class SimulationSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    expected_revenue: float
    min_revenue: float
    max_revenue: float
    percentiles: Percentiles
    distribution: List[DistributionBucket]

class SimulationSnapshot(BaseModel):
    run_id: str
    status: Literal["queued", "done", "failed"]
    submitted_at: str
    finished_at: Optional[str] = None
    iterations: int
    summary: Optional[SimulationSummary] = None
    error: Optional[str] = None

class SimulationCreateRequest(BaseModel):
    # Omitted claims fall back to the service's claim set
    claims: Optional[List[Claim]] = None
    probabilities: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_PROBABILITIES))
    iterations: Optional[int] = Field(default=None, ge=1, le=MAX_ITERATIONS)
    seed: Optional[int] = None

class RunResponse(BaseModel):
    run_id: str
    status: Literal["queued", "done", "failed"]

class StatusCount(BaseModel):
    status: str
    count: int

class StatusAmount(BaseModel):
    status: str
    amount: float

class ClaimStats(BaseModel):
    total_amount: float
    total_claims: int
    status_counts: List[StatusCount]
    amount_by_status: List[StatusAmount]
