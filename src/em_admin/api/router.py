"""em_admin REST API — participants and market lifecycle (all submits).

POST /createConsumer             {id, beta, theta, demandMin, demandMax, initialBalance}
POST /createProducer             {id, a, b, productionMin, productionMax, ownerId}
POST /transferProducerOwnership  {producerId, currentOwnerId, newOwnerId}
POST /initMarket | /updateMarket | /initLedger | /clearLedger
POST /runMarketUntilConvergence  {maxIterations}
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.em_admin.application import service as svc
from src.em_admin.application.schemas import (
    CreateConsumerRequest,
    CreateProducerRequest,
    RunMarketRequest,
    TransferOwnershipRequest,
)
from src.em_common.enums import LedgerTx
from src.em_common.response import ApiResponse, ack_response
from src.em_ledger.application.dependencies import get_session_manager
from src.em_ledger.application.session import LedgerSessionManager

router = APIRouter(tags=["admin"])

Sessions = Annotated[LedgerSessionManager, Depends(get_session_manager)]


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.post("/createConsumer", response_model=ApiResponse)
async def create_consumer(
    body: CreateConsumerRequest, request: Request, sessions: Sessions
) -> ApiResponse:
    await svc.create_consumer(body, sessions)
    return ack_response("Consumer created successfully", _request_id(request))


@router.post("/createProducer", response_model=ApiResponse)
async def create_producer(
    body: CreateProducerRequest, request: Request, sessions: Sessions
) -> ApiResponse:
    await svc.create_producer(body, sessions)
    return ack_response("Producer created successfully", _request_id(request))


@router.post("/transferProducerOwnership", response_model=ApiResponse)
async def transfer_producer_ownership(
    body: TransferOwnershipRequest, request: Request, sessions: Sessions
) -> ApiResponse:
    await svc.transfer_producer_ownership(body, sessions)
    return ack_response("Producer ownership transferred successfully", _request_id(request))


@router.post("/runMarketUntilConvergence", response_model=ApiResponse)
async def run_market_until_convergence(
    body: RunMarketRequest, request: Request, sessions: Sessions
) -> ApiResponse:
    await svc.run_market_until_convergence(body, sessions)
    return ack_response("Market run completed successfully", _request_id(request))


@router.post("/initMarket", response_model=ApiResponse)
async def init_market(request: Request, sessions: Sessions) -> ApiResponse:
    await svc.submit_lifecycle(LedgerTx.INIT_MARKET, sessions)
    return ack_response("Market initialized successfully", _request_id(request))


@router.post("/updateMarket", response_model=ApiResponse)
async def update_market(request: Request, sessions: Sessions) -> ApiResponse:
    await svc.submit_lifecycle(LedgerTx.UPDATE_MARKET, sessions)
    return ack_response("Market updated successfully", _request_id(request))


@router.post("/initLedger", response_model=ApiResponse)
async def init_ledger(request: Request, sessions: Sessions) -> ApiResponse:
    await svc.submit_lifecycle(LedgerTx.INIT_LEDGER, sessions)
    return ack_response("Ledger initialized successfully", _request_id(request))


@router.post("/clearLedger", response_model=ApiResponse)
async def clear_ledger(request: Request, sessions: Sessions) -> ApiResponse:
    await svc.submit_lifecycle(LedgerTx.CLEAR_LEDGER, sessions)
    return ack_response("Ledger cleared successfully", _request_id(request))
