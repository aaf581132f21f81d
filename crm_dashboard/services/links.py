from typing import Any
from urllib.parse import quote

from ..api_client import CrmApiClient
from ..errors import ApiError, FetchError
from ..schemas.catalog import BankOut, ProductTypeOut
from ..schemas.links import LinkCreate, LinkRecord
from ..session import SessionManager

LINKS_PATH = "/api/links/products/links/"
BANKS_PATH = "/api/links/banks/"
PRODUCT_TYPES_PATH = "/api/links/products/types/"

WHATSAPP_URL = "https://wa.me/?text="


async def _call(client: CrmApiClient, session: SessionManager, method: str, path: str, fallback: str, json=None) -> Any:
    headers = session.auth_headers()
    try:
        return await client.request(method, path, json=json, headers=headers, error_message=fallback)
    except ApiError as exc:
        # Transport failures get the generic message.
        message = exc.message if exc.status_code is not None and exc.payload is not None else fallback
        raise FetchError(message) from exc


def _as_list(data: Any) -> list:
    # Paginated endpoints wrap the items in {"results": [...]}
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        return data["results"]
    if isinstance(data, list):
        return data
    raise FetchError("Unexpected response from server")


async def fetch_links(client: CrmApiClient, session: SessionManager) -> list[LinkRecord]:
    data = await _call(client, session, "GET", LINKS_PATH, "Failed to fetch links")
    try:
        return [LinkRecord.model_validate(item) for item in _as_list(data)]
    except ValueError as exc:
        raise FetchError("Failed to fetch links") from exc


async def create_link(client: CrmApiClient, session: SessionManager, payload: LinkCreate) -> LinkRecord:
    data = await _call(client, session, "POST", LINKS_PATH, "Failed to create link", json=payload.model_dump())
    try:
        return LinkRecord.model_validate(data)
    except ValueError as exc:
        raise FetchError("Failed to create link") from exc


async def delete_link(client: CrmApiClient, session: SessionManager, link_id: int) -> None:
    await _call(client, session, "DELETE", f"{LINKS_PATH}{link_id}/", "Failed to delete link")


async def list_banks(client: CrmApiClient, session: SessionManager) -> list[BankOut]:
    data = await _call(client, session, "GET", BANKS_PATH, "Failed to fetch banks")
    try:
        return [BankOut.model_validate(item) for item in _as_list(data)]
    except ValueError as exc:
        raise FetchError("Failed to fetch banks") from exc


async def delete_bank(client: CrmApiClient, session: SessionManager, bank_id: int) -> None:
    await _call(client, session, "DELETE", f"{BANKS_PATH}{bank_id}/", "Failed to delete bank")


async def list_product_types(client: CrmApiClient, session: SessionManager) -> list[ProductTypeOut]:
    data = await _call(client, session, "GET", PRODUCT_TYPES_PATH, "Failed to fetch products")
    try:
        return [ProductTypeOut.model_validate(item) for item in _as_list(data)]
    except ValueError as exc:
        raise FetchError("Failed to fetch products") from exc


async def create_product_type(client: CrmApiClient, session: SessionManager, name: str) -> ProductTypeOut:
    data = await _call(client, session, "POST", PRODUCT_TYPES_PATH, "Failed to create product", json={"name": name})
    try:
        return ProductTypeOut.model_validate(data)
    except ValueError as exc:
        raise FetchError("Failed to create product") from exc


async def delete_product_type(client: CrmApiClient, session: SessionManager, product_id: int) -> None:
    await _call(client, session, "DELETE", f"{PRODUCT_TYPES_PATH}{product_id}/", "Failed to delete product")


def share_message(link: LinkRecord, apply_text: str) -> str:
    description = (link.description or "").strip()
    if not description:
        description = f"Check out this offer for {link.product_name} from {link.bank_name}."
    return f"{description}\n\n{apply_text}{link.unique_customer_link or ''}"


def whatsapp_share_url(link: LinkRecord, apply_text: str) -> str:
    return WHATSAPP_URL + quote(share_message(link, apply_text), safe="!'()*")
