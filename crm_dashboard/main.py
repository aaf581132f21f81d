from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api_client import CrmApiClient
from .config import Settings, get_settings
from .routers import auth, catalog, links
from .session import SessionManager
from .storage import KeyValueStore, get_store
from .utils.logging import configure_logging


def create_app(
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = CrmApiClient(settings.CRM_API_BASE_URL, settings.REQUEST_TIMEOUT_SECONDS, transport=transport)
        session_manager = SessionManager(client, store if store is not None else get_store(settings.SESSION_STORE_PATH))
        session_manager.init()
        app.state.api_client = client
        app.state.session_manager = session_manager
        try:
            yield
        finally:
            session_manager.dispose()
            await client.aclose()

    app = FastAPI(title=settings.APP_NAME, redirect_slashes=False, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router, prefix=settings.API_PREFIX)
    app.include_router(links.router, prefix=settings.API_PREFIX)
    app.include_router(catalog.router, prefix=settings.API_PREFIX)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
