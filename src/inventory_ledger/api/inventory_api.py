"""
Inventory API endpoints.

The caller principal is read from a request header set by the fronting
gateway; this layer trusts it and does not verify it.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel

from ..inventory import Item, LedgerService, Limits

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["inventory"])


class AddItemRequest(BaseModel):
    """Body of an add request."""

    name: str
    quantity: int
    price: int


class AddItemResponse(BaseModel):
    item_id: int


class UpdateItemRequest(BaseModel):
    """Body of an update request. Name and price cannot be changed."""

    quantity: int
    status: str


class SetLimitsRequest(BaseModel):
    max_quantity: int
    max_price: int


def get_service(request: Request) -> LedgerService:
    """Dependency returning the service attached to the app."""
    return request.app.state.service


def get_caller(request: Request) -> str:
    """
    Dependency returning the caller principal.
    
    Raises:
        HTTPException: 401 if the caller header is missing or blank
    """
    header = request.app.state.caller_header
    caller: Optional[str] = request.headers.get(header)
    if not caller or not caller.strip():
        raise HTTPException(status_code=401, detail=f"Missing {header} header")
    return caller.strip()


@router.post("/items", response_model=AddItemResponse, status_code=status.HTTP_201_CREATED)
def add_item(
    body: AddItemRequest,
    caller: str = Depends(get_caller),
    service: LedgerService = Depends(get_service),
) -> AddItemResponse:
    """
    Add an item to the caller's inventory.
    
    Returns:
        The allocated item id
    """
    item_id = service.add_item(caller, body.name, body.quantity, body.price)
    return AddItemResponse(item_id=item_id)


@router.get("/items", response_model=List[Item])
def get_inventory(
    caller: str = Depends(get_caller),
    service: LedgerService = Depends(get_service),
) -> List[Item]:
    """
    List every slot of the caller's inventory, removed ones as zero items.
    """
    return service.get_inventory(caller)


@router.put("/items/{item_id}", response_model=Item)
def update_item(
    item_id: int,
    body: UpdateItemRequest,
    caller: str = Depends(get_caller),
    service: LedgerService = Depends(get_service),
) -> Item:
    """
    Update quantity and status of one of the caller's items.
    
    Returns:
        The item after the update
    """
    return service.update_item(caller, item_id, body.quantity, body.status)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(
    item_id: int,
    caller: str = Depends(get_caller),
    service: LedgerService = Depends(get_service),
) -> Response:
    """Remove one of the caller's items."""
    service.remove_item(caller, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/limits", response_model=Limits)
def get_limits(service: LedgerService = Depends(get_service)) -> Limits:
    return service.get_limits()


@router.put("/limits", response_model=Limits)
def set_limits(
    body: SetLimitsRequest,
    service: LedgerService = Depends(get_service),
) -> Limits:
    """
    Replace the global quantity/price bounds.
    
    Open to any caller, matching the store's behaviour.
    """
    return service.set_limits(body.max_quantity, body.max_price)


@router.get("/{owner}/items/{item_id}", response_model=Item)
def get_item(
    owner: str,
    item_id: int,
    service: LedgerService = Depends(get_service),
) -> Item:
    """
    Public read of any owner's item slot.
    """
    return service.get_item(owner, item_id)
