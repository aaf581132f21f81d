import json
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

BASE_URL = "http://crm.test"

ADMIN_USER = {
    "id": 1,
    "phone": "9999999999",
    "first_name": "Asha",
    "last_name": "Rao",
    "email": "asha@example.com",
    "role": "ADMIN",
}

STAFF_USER = {**ADMIN_USER, "id": 2, "phone": "8888888888", "role": "STAFF"}

LOGIN_PATH = "/api/auth/login/"
REGISTER_PATH = "/api/auth/register/"
LINKS_PATH = "/api/links/products/links/"
BANKS_PATH = "/api/links/banks/"
PRODUCT_TYPES_PATH = "/api/links/products/types/"


def link(id, bank, bank_name, product, product_name, **extra) -> dict:
    return {
        "id": id,
        "bank": bank,
        "bank_name": bank_name,
        "product": product,
        "product_name": product_name,
        **extra,
    }


def login_body(user: dict = ADMIN_USER, access: str = "acc-1", refresh: str = "ref-1") -> dict:
    return {"access": access, "refresh": refresh, "user": user}


@dataclass
class FakeBackend:
    """
    Routes (method, path) to canned responses and records every request.
    A route value is either a (status, body) tuple or a handler taking the
    request; async handlers are awaited by httpx.MockTransport.
    """

    routes: dict[tuple[str, str], Any] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def on(self, method: str, path: str, status: int = 200, body: Any = None, handler: Callable | None = None):
        self.routes[(method, path)] = handler or (status, body)

    def handle(self, request: httpx.Request):
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"detail": "Not found."})
        if callable(route):
            return route(request)
        status, body = route
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)
