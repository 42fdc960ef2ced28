"""FastAPI server exposing the agent's fleet and planet operations.

Each endpoint maps to one agent tool: send/resolve fleets, exit and verify
planets, acquire planets, and read-only planet queries.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from ..agent import ConquestAgent, create_agent
from ..config import AgentConfig
from ..errors import ConquestAgentError, ErrorType
from ..models.fleet import SendOptions
from ..utils.constants import DEFAULT_SEARCH_RADIUS
from .schemas.requests import (
    AcquirePlanetsRequest,
    CleanupRequest,
    ExitPlanetsRequest,
    SendFleetRequest,
    parse_planet_id,
)
from .schemas.responses import (
    AcquirePlanetsResponse,
    CleanupResponse,
    ErrorResponse,
    ExitPlanetsResponse,
    ExitResponse,
    FleetFailureResponse,
    FleetResponse,
    PlanetResponse,
    ResolveAllResponse,
    ResolveFleetResponse,
    VerifyExitResponse,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorType.LOOKUP: 404,
    ErrorType.CONFIGURATION: 503,
    ErrorType.LEDGER: 502,
    ErrorType.STORAGE: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the agent at startup and run the periodic sweeper."""
    logger.info("Conquest agent server starting...")
    agent = await create_agent(AgentConfig.from_env())
    app.state.agent = agent

    stop = asyncio.Event()
    sweeper = asyncio.create_task(agent.run_sweeper(stop)) if agent.can_sign else None
    yield
    logger.info("Conquest agent server shutting down...")
    stop.set()
    if sweeper is not None:
        await sweeper


app = FastAPI(
    title="Conquest Agent API",
    description="Commit-reveal fleet and planet exit management for Conquest",
    version="0.1.0",
    lifespan=lifespan,
)


def get_agent(request: Request) -> ConquestAgent:
    """Dependency returning the agent built at startup."""
    return request.app.state.agent


def _planet_id(value: str) -> int:
    try:
        return parse_planet_id(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.exception_handler(ConquestAgentError)
async def agent_error_handler(request: Request, exc: ConquestAgentError):
    status_code = ERROR_STATUS.get(exc.error_type, 500)
    if status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.message}", exc_info=exc)
    else:
        logger.warning(f"{request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=exc.message, errorType=exc.error_type.value).model_dump(),
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.warning(f"{request.url.path} rejected: {exc}")
    return JSONResponse(status_code=400, content=ErrorResponse(error=str(exc)).model_dump())


# ============================================
# API ENDPOINTS
# ============================================


@app.get("/api")
async def api_root(agent: ConquestAgent = Depends(get_agent)):
    """API root endpoint - server health check."""
    return {
        "service": "Conquest Agent",
        "status": "operational",
        "gameContract": agent.config.game_contract,
        "account": agent.ledger.account,
    }


@app.post("/api/fleets", response_model=FleetResponse)
async def send_fleet(request: SendFleetRequest, agent: ConquestAgent = Depends(get_agent)):
    """Send a fleet. The response carries the secret; keep it private.

    Example:
        POST /api/fleets
        {"fromPlanetId": "0x64", "toPlanetId": 200, "quantity": 50}
    """
    options = SendOptions(
        gift=request.gift,
        specific=request.specific,
        arrival_time_wanted=request.arrivalTimeWanted,
    )
    if request.fleetSender:
        fleet = await agent.fleets.send_for(
            request.fleetSender,
            request.fleetOwner or request.fleetSender,
            request.fromPlanetId,
            request.toPlanetId,
            request.quantity,
            options,
        )
    else:
        fleet = await agent.fleets.send(
            request.fromPlanetId, request.toPlanetId, request.quantity, options
        )
    return FleetResponse.from_fleet(fleet, include_secret=True)


@app.get("/api/fleets/pending", response_model=list[FleetResponse])
async def get_pending_fleets(agent: ConquestAgent = Depends(get_agent)):
    """Unresolved fleets sent by the signing account."""
    return [FleetResponse.from_fleet(f) for f in await agent.queries.get_pending_fleets()]


@app.post("/api/fleets/resolve-ready", response_model=ResolveAllResponse)
async def resolve_all_ready(agent: ConquestAgent = Depends(get_agent)):
    """Resolve every fleet whose resolve window has passed."""
    result = await agent.fleets.resolve_all_ready()
    return ResolveAllResponse(
        successful=[FleetResponse.from_fleet(f) for f in result.successful],
        failed=[FleetFailureResponse(fleetId=f.fleet_id, reason=f.reason) for f in result.failed],
    )


@app.post("/api/fleets/{fleet_id}/resolve", response_model=ResolveFleetResponse)
async def resolve_fleet(fleet_id: str, agent: ConquestAgent = Depends(get_agent)):
    """Resolve a fleet; "too early" is reported with success=false, not as an error."""
    result = await agent.fleets.resolve(fleet_id)
    return ResolveFleetResponse(
        success=result.resolved,
        status=result.status.value,
        reason=result.reason,
        fleet=FleetResponse.from_fleet(result.fleet),
    )


@app.post("/api/planets/exit", response_model=ExitPlanetsResponse)
async def exit_planets(request: ExitPlanetsRequest, agent: ConquestAgent = Depends(get_agent)):
    """Exit (unstake) planets."""
    result = await agent.exits.exit(request.planetIds, request.owner)
    return ExitPlanetsResponse(
        txHash=result.tx_hash, exitsInitiated=[str(pid) for pid in result.exits_initiated]
    )


@app.get("/api/exits/pending", response_model=list[ExitResponse])
async def get_pending_exits(agent: ConquestAgent = Depends(get_agent)):
    """Exit records initiated by the signing account."""
    return [ExitResponse.from_exit(e) for e in await agent.queries.get_pending_exits()]


@app.post("/api/planets/{planet_id}/verify-exit", response_model=VerifyExitResponse)
async def verify_exit_status(planet_id: str, agent: ConquestAgent = Depends(get_agent)):
    """Check whether a planet exit completed or was interrupted."""
    verification = await agent.exits.verify_exit_status(_planet_id(planet_id))
    return VerifyExitResponse.from_verification(verification)


@app.post("/api/planets/acquire", response_model=AcquirePlanetsResponse)
async def acquire_planets(
    request: AcquirePlanetsRequest, agent: ConquestAgent = Depends(get_agent)
):
    """Acquire (stake) planets."""
    result = await agent.acquire(request.planetIds, request.amountToMint, request.tokenAmount)
    return AcquirePlanetsResponse(
        txHash=result.tx_hash, planetsAcquired=[str(pid) for pid in result.planets_acquired]
    )


@app.get("/api/planets/mine", response_model=list[PlanetResponse])
async def get_my_planets(
    radius: int = DEFAULT_SEARCH_RADIUS, agent: ConquestAgent = Depends(get_agent)
):
    """Planets owned by the signing account within ``radius`` of the origin."""
    return [PlanetResponse.from_view(v) for v in await agent.queries.get_my_planets(radius)]


@app.get("/api/planets/{planet_id}/around", response_model=list[PlanetResponse])
async def get_planets_around(
    planet_id: str, radius: int, agent: ConquestAgent = Depends(get_agent)
):
    """Planets within ``radius`` of a center planet."""
    views = await agent.queries.get_planets_around(_planet_id(planet_id), radius)
    return [PlanetResponse.from_view(v) for v in views]


@app.post("/api/cleanup", response_model=CleanupResponse)
async def cleanup(request: CleanupRequest, agent: ConquestAgent = Depends(get_agent)):
    """Remove resolved fleets and completed exits past the retention age."""
    fleets_removed, exits_removed = await agent.cleanup(request.olderThanDays)
    return CleanupResponse(fleetsRemoved=fleets_removed, exitsRemoved=exits_removed)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
