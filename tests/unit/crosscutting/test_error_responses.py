"""
Name: Error Envelope Unit Tests

Responsibilities:
  - Factories map to stable status codes and ErrorCode values
  - The handler renders the envelope and propagates headers
"""

import json
from types import SimpleNamespace

import pytest

from matn_tahlili.crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    internal_error,
    validation_error,
)

pytestmark = pytest.mark.unit


def test_validation_error_factory():
    exc = validation_error("runs: ro'yxat kutilgan")

    assert exc.status_code == 400
    assert exc.code == ErrorCode.VALIDATION_ERROR
    assert exc.detail == "runs: ro'yxat kutilgan"


def test_internal_error_factory_default_detail():
    exc = internal_error()

    assert exc.status_code == 500
    assert exc.code == ErrorCode.INTERNAL_ERROR
    assert exc.detail == "Server xatosi"


@pytest.mark.asyncio
async def test_handler_renders_envelope_with_headers():
    request = SimpleNamespace(state=SimpleNamespace(request_id="req-9"))
    exc = AppHTTPException(
        500,
        ErrorCode.INTERNAL_ERROR,
        "Server xatosi",
        error_id="err-1",
        headers={"X-Request-Id": "req-9"},
    )

    response = await app_exception_handler(request, exc)

    assert response.status_code == 500
    assert response.headers["X-Request-Id"] == "req-9"
    assert json.loads(response.body) == {
        "error": "Server xatosi",
        "code": "INTERNAL_ERROR",
        "error_id": "err-1",
        "request_id": "req-9",
    }
