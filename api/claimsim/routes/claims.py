from typing import List

from fastapi import APIRouter, Request

from claimsim.core.claims import summarize_claims
from claimsim.models.schemas import Claim, ClaimStats

router = APIRouter(prefix="/claims", tags=["claims"])


@router.get("", response_model=List[Claim])
def list_claims(request: Request):
    return request.app.state.claims.list_claims()


@router.get("/stats", response_model=ClaimStats)
def claim_stats(request: Request):
    return summarize_claims(request.app.state.claims.list_claims())
