import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from claimsim.config import load_config
from claimsim.routes.claims import router as claims_router
from claimsim.routes.simulations import router as simulations_router
from claimsim.services.claims import LocalClaimSource
from claimsim.services.host import SimulationHost


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = load_config()
    logging.basicConfig(level=config.log_level)

    app.state.config = config
    app.state.claims = LocalClaimSource()
    app.state.host = SimulationHost(config=config)
    try:
        yield
    finally:
        app.state.host.close()

app = FastAPI(title="Claim Revenue Simulator", lifespan=lifespan)

@app.get("/health")
def health():
    return {"ok": True}

app.include_router(claims_router)
app.include_router(simulations_router)
