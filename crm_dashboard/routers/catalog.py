from fastapi import APIRouter, Depends, HTTPException

from ..api_client import CrmApiClient
from ..dependencies import get_api_client, get_current_user, get_session_manager, require_admin
from ..errors import FetchError
from ..schemas.auth import AuthUser
from ..schemas.catalog import BankOut, ProductTypeCreate, ProductTypeOut
from ..services import links as link_service
from ..session import SessionManager
from ..utils.logging import log_action

router = APIRouter(tags=["catalog"], dependencies=[Depends(get_current_user)])


@router.get("/banks", response_model=list[BankOut])
async def list_banks(
    client: CrmApiClient = Depends(get_api_client),
    session: SessionManager = Depends(get_session_manager),
):
    try:
        return await link_service.list_banks(client, session)
    except FetchError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.delete("/banks/{bank_id}", status_code=204)
async def delete_bank(
    bank_id: int,
    client: CrmApiClient = Depends(get_api_client),
    session: SessionManager = Depends(get_session_manager),
    user: AuthUser = Depends(require_admin),
):
    try:
        await link_service.delete_bank(client, session, bank_id)
    except FetchError as e:
        raise HTTPException(status_code=400, detail=e.message)

    log_action(user, "delete", "bank", bank_id)


@router.get("/product-types", response_model=list[ProductTypeOut])
async def list_product_types(
    client: CrmApiClient = Depends(get_api_client),
    session: SessionManager = Depends(get_session_manager),
):
    try:
        return await link_service.list_product_types(client, session)
    except FetchError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.post("/product-types", response_model=ProductTypeOut, status_code=201)
async def create_product_type(
    payload: ProductTypeCreate,
    client: CrmApiClient = Depends(get_api_client),
    session: SessionManager = Depends(get_session_manager),
    user: AuthUser = Depends(require_admin),
):
    try:
        product = await link_service.create_product_type(client, session, payload.name)
    except FetchError as e:
        raise HTTPException(status_code=400, detail=e.message)

    log_action(user, "create", "product_type", product.id, {"name": product.name})
    return product


@router.delete("/product-types/{product_id}", status_code=204)
async def delete_product_type(
    product_id: int,
    client: CrmApiClient = Depends(get_api_client),
    session: SessionManager = Depends(get_session_manager),
    user: AuthUser = Depends(require_admin),
):
    try:
        await link_service.delete_product_type(client, session, product_id)
    except FetchError as e:
        raise HTTPException(status_code=400, detail=e.message)

    log_action(user, "delete", "product_type", product_id)
