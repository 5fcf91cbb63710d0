from typing import List, Sequence

from claimsim.models.schemas import Claim

_SAMPLE_RECORDS = [
    {"patient_id": "P1", "patient_name": "John Smith", "billing_code": "B1001", "amount": 1675.50,
     "insurance_provider": "Blue Shield", "status": "Pending", "claim_date": "2025-03-25"},
    {"patient_id": "P2", "patient_name": "Sarah Johnson", "billing_code": "B2002", "amount": 2310.09,
     "insurance_provider": "Medicare", "status": "Approved", "claim_date": "2025-01-05"},
    {"patient_id": "P3", "patient_name": "Robert Chen", "billing_code": "B3003", "amount": 4945.57,
     "insurance_provider": "Aetna", "status": "Pending", "claim_date": "2025-03-04"},
    {"patient_id": "P4", "patient_name": "Lisa Williams", "billing_code": "B4004", "amount": 8338.89,
     "insurance_provider": "UnitedHealth", "status": "Denied", "claim_date": "2025-03-20"},
    {"patient_id": "P5", "patient_name": "Michael Garcia", "billing_code": "B5005", "amount": 3220.05,
     "insurance_provider": "Cigna", "status": "Denied", "claim_date": "2025-02-21"},
]


def sample_claims(repeat: int = 4) -> List[Claim]:
    """Demo claim set: the five sample records, repeated."""
    claims = []
    for i in range(repeat):
        for rec in _SAMPLE_RECORDS:
            claims.append(Claim(id=f"C{len(claims) + 1:03d}", **rec))
    return claims


class LocalClaimSource:
    """Read-only in-memory claim set used when callers don't supply their own."""

    def __init__(self, claims: Sequence[Claim] | None = None):
        self._claims = tuple(claims) if claims is not None else tuple(sample_claims())

    def list_claims(self) -> List[Claim]:
        return list(self._claims)
