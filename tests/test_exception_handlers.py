from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI, HTTPException

from mockrise.modules.booking.schemas import BookingCreate
from mockrise.shared.exceptions import ConflictException, NotFoundException, register_exception_handlers


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/missing")
    async def missing() -> None:
        raise NotFoundException("Interview not found")

    @app.get("/conflict")
    async def conflict() -> None:
        raise ConflictException("Slot was just taken")

    @app.get("/teapot")
    async def teapot() -> None:
        raise HTTPException(status_code=418, detail="short and stout")

    @app.post("/bookings")
    async def create(payload: BookingCreate) -> dict[str, str]:
        return {"mode": str(payload.mode)}

    @app.get("/crash")
    async def crash() -> None:
        raise RuntimeError("boom")

    return app


async def _call(method: str, path: str, **kwargs) -> httpx.Response:
    transport = httpx.ASGITransport(app=_build_app(), raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, path, **kwargs)


@pytest.mark.asyncio
async def test_domain_exceptions_use_error_envelope() -> None:
    missing = await _call("GET", "/missing")
    conflict = await _call("GET", "/conflict")

    assert missing.status_code == 404
    assert missing.json() == {"success": False, "error": "Interview not found", "code": "not_found"}
    assert conflict.status_code == 409
    assert conflict.json()["code"] == "conflict"


@pytest.mark.asyncio
async def test_http_exception_keeps_status() -> None:
    response = await _call("GET", "/teapot")

    assert response.status_code == 418
    assert response.json()["error"] == "short and stout"


@pytest.mark.asyncio
async def test_validation_error_becomes_plain_bad_request() -> None:
    response = await _call(
        "POST",
        "/bookings",
        json={"mode": "ai", "scheduledDate": "2026-03-11", "timeSlot": "25:00 PM", "duration": 60, "language": "english"},
    )

    body = response.json()
    assert response.status_code == 400
    assert body["success"] is False
    assert body["code"] == "bad_request"
    assert "Invalid time format" in body["error"]


@pytest.mark.asyncio
async def test_unexpected_error_is_hidden() -> None:
    response = await _call("GET", "/crash")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error", "code": "internal_error"}
