"""
api/routes/v1/items.py -- Owner-scoped item CRUD routes.

Routes:
  POST   /items            -- create item owned by the caller
  GET    /items            -- list the caller's items
  GET    /items/{item_id}  -- one of the caller's items
  PUT    /items/{item_id}  -- rename / re-describe one of the caller's items
  DELETE /items/{item_id}  -- hard-delete one of the caller's items

Ownership:
  get_current_identity is a router-level dependency, so every route here
  requires a valid Bearer token before the handler runs. The owner id always
  comes from the token, never from the request. Another tenant's item id
  behaves exactly like a nonexistent one: 404 "Item not found".
"""

from fastapi import APIRouter, Depends, Request

from api.models import DeleteResponse, ItemCreate, ItemResponse, ItemUpdate
from auth.dependencies import get_current_identity
from auth.models import CurrentIdentity
from items.service import ItemService

router = APIRouter(dependencies=[Depends(get_current_identity)])


def _service(request: Request) -> ItemService:
    return request.app.state.item_service


@router.post("/items", response_model=ItemResponse, status_code=201)
def create_item(
    request: Request,
    body: ItemCreate,
    identity: CurrentIdentity = Depends(get_current_identity),
) -> ItemResponse:
    """Create an item. Unparsable price/quantity values are stored as 0."""
    item = _service(request).create(
        identity.id,
        body.name,
        description=body.description,
        price=body.price,
        quantity=body.quantity,
    )
    return ItemResponse.from_item(item)


@router.get("/items", response_model=list[ItemResponse])
def list_items(
    request: Request,
    identity: CurrentIdentity = Depends(get_current_identity),
) -> list[ItemResponse]:
    """Return every item owned by the caller."""
    return [ItemResponse.from_item(i) for i in _service(request).list_items(identity.id)]


@router.get("/items/{item_id}", response_model=ItemResponse)
def get_item(
    request: Request,
    item_id: int,
    identity: CurrentIdentity = Depends(get_current_identity),
) -> ItemResponse:
    return ItemResponse.from_item(_service(request).get(identity.id, item_id))


@router.put("/items/{item_id}", response_model=ItemResponse)
def update_item(
    request: Request,
    item_id: int,
    body: ItemUpdate,
    identity: CurrentIdentity = Depends(get_current_identity),
) -> ItemResponse:
    """Replace name and description. An omitted description is cleared."""
    item = _service(request).update(identity.id, item_id, body.name, body.description)
    return ItemResponse.from_item(item)


@router.delete("/items/{item_id}", response_model=DeleteResponse)
def delete_item(
    request: Request,
    item_id: int,
    identity: CurrentIdentity = Depends(get_current_identity),
) -> DeleteResponse:
    deleted_id = _service(request).delete(identity.id, item_id)
    return DeleteResponse(id=deleted_id)
