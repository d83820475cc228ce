# src/em_order/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.em_common.response import ApiResponse, ack_response
from src.em_ledger.application.dependencies import get_session_manager
from src.em_ledger.application.session import LedgerSessionManager
from src.em_order.application import service as svc
from src.em_order.application.schemas import PlaceOrderRequest

router = APIRouter(tags=["orders"])

Sessions = Annotated[LedgerSessionManager, Depends(get_session_manager)]


@router.post("/placeOrder", response_model=ApiResponse)
async def place_order(req: PlaceOrderRequest, request: Request, sessions: Sessions) -> ApiResponse:
    await svc.place_order(req, sessions)
    return ack_response("Order placed successfully", getattr(request.state, "request_id", None))


@router.post("/matchOrders", response_model=ApiResponse)
async def match_orders(request: Request, sessions: Sessions) -> ApiResponse:
    await svc.match_orders(sessions)
    return ack_response("Orders matched successfully", getattr(request.state, "request_id", None))
