from fastapi import APIRouter, Depends, HTTPException

from ..api_client import CrmApiClient
from ..config import get_settings
from ..dependencies import get_api_client, get_current_user, get_session_manager
from ..errors import FetchError
from ..matrix import LinkMatrix, build_matrix
from ..schemas.auth import AuthUser
from ..schemas.links import LinkCreate, LinkMatrixOut, LinkRecord, ShareOut
from ..services import links as link_service
from ..session import SessionManager
from ..utils.logging import log_action

router = APIRouter(prefix="/links", tags=["links"], dependencies=[Depends(get_current_user)])


def _matrix_out(matrix: LinkMatrix, error: str | None = None) -> LinkMatrixOut:
    return LinkMatrixOut(
        rows=list(matrix.rows),
        columns=list(matrix.columns),
        cells=matrix.as_grid(),
        error=error,
    )


@router.get("", response_model=list[LinkRecord])
async def list_links(
    client: CrmApiClient = Depends(get_api_client),
    session: SessionManager = Depends(get_session_manager),
):
    try:
        return await link_service.fetch_links(client, session)
    except FetchError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.get("/matrix", response_model=LinkMatrixOut)
async def get_link_matrix(
    client: CrmApiClient = Depends(get_api_client),
    session: SessionManager = Depends(get_session_manager),
):
    """
    Bank x product grid of links. A failed fetch still answers 200 with an
    empty grid and the error text for the page banner.
    """
    try:
        links = await link_service.fetch_links(client, session)
    except FetchError as e:
        return _matrix_out(build_matrix([]), error=e.message)
    return _matrix_out(build_matrix(links))


@router.post("", response_model=LinkRecord, status_code=201)
async def create_link(
    payload: LinkCreate,
    client: CrmApiClient = Depends(get_api_client),
    session: SessionManager = Depends(get_session_manager),
    user: AuthUser = Depends(get_current_user),
):
    try:
        link = await link_service.create_link(client, session, payload)
    except FetchError as e:
        raise HTTPException(status_code=400, detail=e.message)

    log_action(user, "create", "link", link.id, {"bank": link.bank, "product": link.product})
    return link


@router.delete("/{link_id}", status_code=204)
async def delete_link(
    link_id: int,
    client: CrmApiClient = Depends(get_api_client),
    session: SessionManager = Depends(get_session_manager),
    user: AuthUser = Depends(get_current_user),
):
    try:
        await link_service.delete_link(client, session, link_id)
    except FetchError as e:
        raise HTTPException(status_code=400, detail=e.message)

    log_action(user, "delete", "link", link_id)


@router.get("/{link_id}/share", response_model=ShareOut)
async def share_link(
    link_id: int,
    client: CrmApiClient = Depends(get_api_client),
    session: SessionManager = Depends(get_session_manager),
):
    """WhatsApp message and deep link for sending a link to a customer."""
    try:
        links = await link_service.fetch_links(client, session)
    except FetchError as e:
        raise HTTPException(status_code=502, detail=e.message)

    link = next((l for l in links if l.id == link_id), None)
    if link is None:
        raise HTTPException(status_code=404, detail="Link not found")

    apply_text = get_settings().SHARE_APPLY_TEXT
    return ShareOut(
        message=link_service.share_message(link, apply_text),
        url=link_service.whatsapp_share_url(link, apply_text),
    )
