import json
import logging

import pytest

from pagefetch import PageFetchController, RequestConfig, TransportResponse, WrappedShape
from pagefetch._logging import redact_headers


@pytest.fixture
def secured_config() -> RequestConfig:
    return RequestConfig(
        endpoint="https://api.example.com/orders",
        page_size=2,
        bearer_token="super-secret-token",
        response_shape=WrappedShape(),
    )


@pytest.mark.asyncio
async def test_logging_lifecycle(secured_config, transport, caplog):
    """Verify that logging occurs at expected levels during a fetch cycle."""
    transport.queue(
        TransportResponse(200, json.dumps({"status": True, "data": [{"id": 1}, {"id": 2}]})),
        TransportResponse(200, json.dumps({"status": False, "data": []})),
    )
    controller = PageFetchController(secured_config, transport)

    caplog.set_level(logging.DEBUG, logger="pagefetch")

    await controller.fetch()

    assert "Request built" in caplog.text  # DEBUG
    assert "Fetching page" in caplog.text  # INFO
    assert "Page applied" in caplog.text  # INFO

    # Context travels in 'extra' fields
    has_context = any(
        getattr(record, "endpoint", None) == "https://api.example.com/orders"
        and getattr(record, "page", None) == 1
        for record in caplog.records
    )
    assert has_context, "Log records missing 'endpoint'/'page' context"

    await controller.fetch()

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].error_kind == "api"
    assert errors[0].page == 2
    assert "Fetch failed" in errors[0].getMessage()


@pytest.mark.asyncio
async def test_bearer_token_never_logged(secured_config, transport, caplog):
    transport.queue(TransportResponse(200, json.dumps({"status": True, "data": []})))
    controller = PageFetchController(secured_config, transport)

    caplog.set_level(logging.DEBUG, logger="pagefetch")
    await controller.fetch()

    # The transport still receives the real header
    assert transport.calls[0]["headers"]["Authorization"] == "Bearer super-secret-token"

    for record in caplog.records:
        assert "super-secret-token" not in record.getMessage()
        assert "super-secret-token" not in str(getattr(record, "headers", ""))


@pytest.mark.asyncio
async def test_skipped_fetch_is_logged(secured_config, transport, caplog):
    controller = PageFetchController(secured_config, transport)
    controller.dispose()

    caplog.set_level(logging.DEBUG, logger="pagefetch")
    await controller.fetch()

    assert "Fetch skipped" in caplog.text


def test_redact_headers():
    headers = {"Authorization": "Bearer abc", "cookie": "session=1", "Accept": "application/json"}

    redacted = redact_headers(headers)

    assert redacted["Accept"] == "application/json"
    assert redacted["Authorization"].startswith("<redacted:")
    assert "Bearer" not in redacted["Authorization"]
    assert redacted["cookie"].startswith("<redacted:")
    # Same value, same digest: lines stay correlatable
    assert redact_headers(headers) == redacted


def test_library_logger_has_null_handler():
    logger = logging.getLogger("pagefetch")
    assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)
