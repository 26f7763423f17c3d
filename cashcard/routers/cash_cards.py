from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Request, Response

from cashcard.core.config import Settings
from cashcard.domain.cash_card import CARD_ID_MAX, CARD_ID_MIN
from cashcard.domain.paging import build_page_request
from cashcard.routers.dependencies import (
    cash_card_payload,
    current_principal,
    get_app_settings,
    get_cash_card_service,
)
from cashcard.schemas.cash_card import CashCardPayload, CashCardView
from cashcard.services.cash_card_service import CashCardService
from cashcard.services.identity_service import AuthenticatedPrincipal

router = APIRouter(prefix="/cashcards", tags=["cashcards"])


@router.get("/{requested_id}", response_model=CashCardView)
def get_cash_card(
    requested_id: int = Path(..., ge=CARD_ID_MIN, le=CARD_ID_MAX),
    principal: AuthenticatedPrincipal = Depends(current_principal),
    service: CashCardService = Depends(get_cash_card_service),
):
    return CashCardView.from_card(service.find(principal, requested_id))


@router.get("", response_model=List[CashCardView])
def list_cash_cards(
    principal: AuthenticatedPrincipal = Depends(current_principal),
    service: CashCardService = Depends(get_cash_card_service),
    settings: Settings = Depends(get_app_settings),
    page: Optional[int] = Query(None),
    size: Optional[int] = Query(None),
    sort: Optional[List[str]] = Query(None),
):
    page_request = build_page_request(
        page,
        size,
        sort,
        default_size=settings.page_size_default,
        max_size=settings.page_size_max,
    )
    return [CashCardView.from_card(card) for card in service.list(principal, page_request)]


@router.post("", status_code=201)
def create_cash_card(
    request: Request,
    principal: AuthenticatedPrincipal = Depends(current_principal),
    payload: CashCardPayload = Depends(cash_card_payload),
    service: CashCardService = Depends(get_cash_card_service),
):
    card = service.create(principal, payload.amount)
    location = request.url_for("get_cash_card", requested_id=str(card.id))
    return Response(status_code=201, headers={"Location": str(location)})


@router.put("/{requested_id}", status_code=204)
def put_cash_card(
    requested_id: int = Path(..., ge=CARD_ID_MIN, le=CARD_ID_MAX),
    principal: AuthenticatedPrincipal = Depends(current_principal),
    payload: CashCardPayload = Depends(cash_card_payload),
    service: CashCardService = Depends(get_cash_card_service),
):
    service.update(principal, requested_id, payload.amount)
    return Response(status_code=204)


@router.delete("/{requested_id}", status_code=204)
def delete_cash_card(
    requested_id: int = Path(..., ge=CARD_ID_MIN, le=CARD_ID_MAX),
    principal: AuthenticatedPrincipal = Depends(current_principal),
    service: CashCardService = Depends(get_cash_card_service),
):
    service.delete(principal, requested_id)
    return Response(status_code=204)
