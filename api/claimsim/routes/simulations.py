import asyncio
import logging
import traceback
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request

from claimsim.core.simulate import InvalidIterationCount
from claimsim.models.schemas import (
    RunResponse,
    SimulationCreateRequest,
    SimulationRequest,
    SimulationSnapshot,
)
from claimsim.services.host import SimulationHost

router = APIRouter(prefix="/simulations", tags=["simulations"])
logger = logging.getLogger(__name__)


def get_host(request: Request) -> SimulationHost:
    return request.app.state.host


def _build_request(req: SimulationCreateRequest, request: Request) -> SimulationRequest:
    claims = req.claims if req.claims is not None else request.app.state.claims.list_claims()
    iterations = req.iterations if req.iterations is not None else request.app.state.config.default_iterations
    return SimulationRequest(
        claims=claims,
        probabilities=req.probabilities,
        iterations=iterations,
        seed=req.seed,
    )


def _submit(host: SimulationHost, sim_request: SimulationRequest):
    try:
        future = host.submit(sim_request)
    except InvalidIterationCount as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("Failed to submit simulation: %s", e)
        logger.error(traceback.format_exc())
        raise HTTPException(status_code=500, detail=f"Failed to submit simulation: {str(e)}")
    # submit() and this read happen in the same loop turn, so latest is ours
    return future, host.latest


@router.post("", response_model=RunResponse)
async def create_simulation(
    req: SimulationCreateRequest,
    request: Request,
    host: SimulationHost = Depends(get_host),
):
    _, queued = _submit(host, _build_request(req, request))
    return RunResponse(run_id=queued.run_id, status="queued")


@router.post("/run", response_model=SimulationSnapshot)
async def run_simulation(
    req: SimulationCreateRequest,
    request: Request,
    host: SimulationHost = Depends(get_host),
):
    """Submit and wait for the result. 409 if a newer request superseded this one."""
    future, queued = _submit(host, _build_request(req, request))
    await asyncio.wait([future])

    if future.cancelled():
        raise HTTPException(status_code=409, detail=f"Run {queued.run_id} was superseded")

    error = future.exception()
    if error is not None:
        raise HTTPException(status_code=500, detail=f"Simulation failed: {str(error)}")

    latest = host.latest
    if latest is not None and latest.run_id == queued.run_id:
        return latest
    return queued.model_copy(update={
        "status": "done",
        "finished_at": datetime.now(timezone.utc).isoformat(),
        "summary": future.result(),
    })


@router.get("/latest", response_model=SimulationSnapshot)
def get_latest(host: SimulationHost = Depends(get_host)):
    snapshot = host.latest
    if snapshot is None:
        raise HTTPException(status_code=404, detail="No simulation has been run")
    return snapshot
