import asyncio
import os
import sys

from crm_dashboard.api_client import get_api_client
from crm_dashboard.config import get_settings
from crm_dashboard.errors import AuthError, FetchError
from crm_dashboard.matrix import build_matrix
from crm_dashboard.services.links import fetch_links
from crm_dashboard.session import SessionManager
from crm_dashboard.storage import get_store


def log(msg):
    print(msg)
    with open("debug_log.txt", "a", encoding="utf-8") as f:
        f.write(msg + "\n")


async def check_links():
    # Clear previous log
    with open("debug_log.txt", "w", encoding="utf-8") as f:
        f.write("Starting debug...\n")

    settings = get_settings()
    log(f"Backend: {settings.CRM_API_BASE_URL}")
    log(f"Session store: {settings.SESSION_STORE_PATH or 'memory'}")

    client = get_api_client()
    session = SessionManager(client, get_store(settings.SESSION_STORE_PATH))
    try:
        log(f"Restored state: {session.init().value}")
        if not session.is_authenticated:
            phone = os.environ.get("CRM_PHONE", "")
            password = os.environ.get("CRM_PASSWORD", "")
            if not phone or not password:
                log("Not signed in and CRM_PHONE/CRM_PASSWORD are not set.")
                return
            log(f"Logging in as {phone}...")
            await session.login(phone, password)

        log("Fetching links...")
        links = await fetch_links(client, session)
        matrix = build_matrix(links)
        log(f"Success! {len(links)} links, {len(matrix.rows)} banks x {len(matrix.columns)} products.")
        for bank, product, link in matrix.cells():
            log(f"  {bank.name} / {product.name}: {link.unique_customer_link}")
    except (AuthError, FetchError) as e:
        log(f"Error occurred: {e.message}")
    finally:
        await client.aclose()


if __name__ == "__main__":
    sys.path.append(os.getcwd())
    asyncio.run(check_links())
