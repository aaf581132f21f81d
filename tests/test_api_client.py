import httpx
import pytest

from crm_dashboard.api_client import extract_error_message
from crm_dashboard.errors import ApiError


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"message": "Invalid credentials"}, "Invalid credentials"),
        ({"detail": "Not found."}, "Not found."),
        ({"message": "", "detail": "Denied"}, "Denied"),
        ({"phone": ["required"], "email": ["invalid", "taken"]}, "required; invalid; taken"),
        ({"non_field_errors": "Passwords differ"}, "Passwords differ"),
        ({}, "fallback"),
        (None, "fallback"),
        ("plain text", "plain text"),
    ],
)
def test_extract_error_message(payload, expected):
    assert extract_error_message(payload, "fallback") == expected


@pytest.mark.asyncio
async def test_get_returns_parsed_json(backend, api_client):
    backend.on("GET", "/api/thing/", 200, [{"id": 1}])

    assert await api_client.get("/api/thing/", headers={"Authorization": "Bearer t"}) == [{"id": 1}]
    assert backend.requests[0].headers["Authorization"] == "Bearer t"


@pytest.mark.asyncio
async def test_empty_body_returns_none(backend, api_client):
    backend.on("DELETE", "/api/thing/1/", 204)

    assert await api_client.delete("/api/thing/1/") is None


@pytest.mark.asyncio
async def test_error_status_raises_api_error(backend, api_client):
    backend.on("POST", "/api/thing/", 400, {"name": ["This field is required."]})

    with pytest.raises(ApiError) as exc_info:
        await api_client.post("/api/thing/", json={})

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "This field is required."
    assert exc_info.value.payload == {"name": ["This field is required."]}


@pytest.mark.asyncio
async def test_invalid_json_success_body(backend, api_client):
    backend.on("GET", "/api/thing/", handler=lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(ApiError, match="Invalid JSON response"):
        await api_client.get("/api/thing/")


@pytest.mark.asyncio
async def test_transport_error_has_no_status(backend, api_client):
    def refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)

    backend.on("GET", "/api/thing/", handler=refuse)

    with pytest.raises(ApiError) as exc_info:
        await api_client.get("/api/thing/")

    assert exc_info.value.status_code is None
