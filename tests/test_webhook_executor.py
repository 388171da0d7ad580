"""Tests for the webhook execution engine."""
from __future__ import annotations

import json
from unittest.mock import MagicMock

import httpx
import pytest
from sqlalchemy.orm import Session

from tests.conftest import RecordingTarget, unreachable
from webhook_studio.models.webhook_response import ResponseDataFormat, WebhookResponse
from webhook_studio.schemas.webhook import WebhookDefinition, WebhookHeader
from webhook_studio.schemas.webhook_response import JsonBody, TextBody
from webhook_studio.services.errors import StoreWriteError, WebhookTransportError, WebhookValidationError
from webhook_studio.services.response_repository import ResponseRepository
from webhook_studio.services.webhook_executor import (
    PreparedRequest,
    WebhookExecutor,
    assemble_headers,
    decode_body,
)


def _definition(**overrides) -> WebhookDefinition:
    values = {
        "url": "https://example.com/hook",
        "method": "POST",
        "headers": [],
        "default_payload": '{"x":1}',
    }
    values.update(overrides)
    return WebhookDefinition(**values)


class TestBuildRequest:
    """Request construction rules."""

    def test_example_webhook_request(self, webhook) -> None:
        """Enabled headers are sent, disabled ones are not, default payload is the body."""
        request = WebhookExecutor().build_request(webhook)

        assert request.method == "POST"
        assert request.url == "https://example.com/hook"
        assert request.headers == {"Content-Type": "application/json", "X-Test": "1"}
        assert "X-Off" not in request.headers
        assert request.body == '{"x":1}'

    @pytest.mark.parametrize("payload", ['{"a": 1}', "not json at all", ""])
    def test_get_never_has_a_body(self, payload: str) -> None:
        request = WebhookExecutor().build_request(_definition(method="GET", default_payload=payload), payload)

        assert request.body is None

    def test_override_replaces_default_payload(self) -> None:
        request = WebhookExecutor().build_request(_definition(), '{"override":true}')

        assert request.body == '{"override":true}'

    def test_empty_override_is_still_an_override(self) -> None:
        request = WebhookExecutor().build_request(_definition(), "")

        assert request.body == ""

    def test_payload_passed_verbatim(self) -> None:
        payload = '{\n  "spaced" :  [1,2 ,3]\n}'
        request = WebhookExecutor().build_request(_definition(method="PUT", default_payload=payload))

        assert request.body == payload

    def test_missing_url_fails_before_dispatch(self) -> None:
        with pytest.raises(WebhookValidationError, match="URL is required"):
            WebhookExecutor().build_request(_definition(url=""))

    @pytest.mark.parametrize("url", ["/relative/path", "ftp://example.com/file", "example.com/hook"])
    def test_non_absolute_http_url_is_rejected(self, url: str) -> None:
        with pytest.raises(WebhookValidationError):
            WebhookExecutor().build_request(_definition(url=url))

    def test_unknown_method_is_rejected(self) -> None:
        with pytest.raises(WebhookValidationError, match="Unsupported HTTP method"):
            WebhookExecutor().build_request(_definition(method="TRACE"))

    @pytest.mark.parametrize(
        "header",
        [WebhookHeader(key="X-Name", value="café"), WebhookHeader(key="X-Naïve", value="1")],
    )
    def test_non_ascii_header_is_rejected(self, header: WebhookHeader) -> None:
        with pytest.raises(WebhookValidationError, match="ASCII"):
            WebhookExecutor().build_request(_definition(headers=[header]))

    def test_disabled_non_ascii_header_is_ignored(self) -> None:
        request = WebhookExecutor().build_request(
            _definition(headers=[WebhookHeader(key="X-Name", value="café", enabled=False)])
        )

        assert "X-Name" not in request.headers

    def test_headers_decoded_from_stored_text(self) -> None:
        """ORM rows keep headers as JSON text; malformed text means no extra headers."""
        row = MagicMock(url="https://example.com", method="POST", default_payload="", headers="{broken")

        request = WebhookExecutor().build_request(row)

        assert request.headers == {"Content-Type": "application/json"}

    def test_invalid_stored_header_entries_are_skipped(self) -> None:
        row = MagicMock(
            url="https://example.com",
            method="POST",
            default_payload="",
            headers='["x", {"foo": 1}, {"key": "X-Kept", "value": "yes"}]',
        )

        request = WebhookExecutor().build_request(row)

        assert request.headers == {"Content-Type": "application/json", "X-Kept": "yes"}


class TestAssembleHeaders:
    """Header overlay rules."""

    def test_content_type_is_always_present(self) -> None:
        assert assemble_headers([]) == {"Content-Type": "application/json"}

    def test_later_duplicate_overwrites_earlier(self) -> None:
        headers = assemble_headers(
            [
                WebhookHeader(key="Authorization", value="Bearer old"),
                WebhookHeader(key="Authorization", value="Bearer new"),
            ]
        )

        assert headers["Authorization"] == "Bearer new"

    def test_enabled_header_can_replace_content_type(self) -> None:
        headers = assemble_headers([WebhookHeader(key="content-type", value="text/plain")])

        assert headers == {"content-type": "text/plain"}

    def test_disabled_header_reintroduced_by_later_enabled_entry(self) -> None:
        headers = assemble_headers(
            [
                WebhookHeader(key="X-Token", value="a", enabled=False),
                WebhookHeader(key="X-Token", value="b", enabled=True),
            ]
        )

        assert headers["X-Token"] == "b"

    def test_disabled_header_does_not_remove_earlier_enabled(self) -> None:
        headers = assemble_headers(
            [
                WebhookHeader(key="X-Token", value="a", enabled=True),
                WebhookHeader(key="X-Token", value="b", enabled=False),
            ]
        )

        assert headers["X-Token"] == "a"


class TestDecodeBody:
    """Response body normalization."""

    def test_valid_json_is_parsed(self) -> None:
        response = httpx.Response(200, json={"a": [1, 2]})

        assert decode_body(response) == JsonBody(value={"a": [1, 2]})

    def test_invalid_json_falls_back_to_text(self) -> None:
        response = httpx.Response(200, headers={"content-type": "application/json"}, text="{not json")

        assert decode_body(response) == TextBody(value="{not json")

    def test_json_with_charset_parameter(self) -> None:
        response = httpx.Response(
            200, headers={"content-type": "application/json; charset=utf-8"}, content=b"[1, 2]"
        )

        assert decode_body(response) == JsonBody(value=[1, 2])

    def test_non_json_content_type_is_text_even_if_parsable(self) -> None:
        response = httpx.Response(200, headers={"content-type": "text/plain"}, text='{"a": 1}')

        assert decode_body(response) == TextBody(value='{"a": 1}')


class TestDispatch:
    """Sending requests through the transport."""

    @pytest.mark.asyncio
    async def test_outbound_request_matches_definition(self, webhook, target: RecordingTarget) -> None:
        await WebhookExecutor(transport=target.transport).dispatch(webhook)

        sent = target.last
        assert sent.method == "POST"
        assert str(sent.url) == "https://example.com/hook"
        assert sent.headers["content-type"] == "application/json"
        assert sent.headers["x-test"] == "1"
        assert "x-off" not in sent.headers
        assert sent.content == b'{"x":1}'

    @pytest.mark.asyncio
    async def test_get_request_sends_empty_body(self) -> None:
        target = RecordingTarget()

        await WebhookExecutor(transport=target.transport).dispatch(
            _definition(method="GET", default_payload='{"ignored": true}')
        )

        assert target.last.method == "GET"
        assert target.last.content == b""

    @pytest.mark.asyncio
    async def test_response_is_normalized(self) -> None:
        target = RecordingTarget(
            lambda request: httpx.Response(201, headers={"X-Request-Id": "abc"}, json={"created": True})
        )

        response = await WebhookExecutor(transport=target.transport).dispatch(_definition())

        assert response.status == 201
        assert response.status_text == "Created"
        assert response.headers["x-request-id"] == "abc"
        assert response.body == JsonBody(value={"created": True})
        assert response.timestamp.tzinfo is not None

    @pytest.mark.asyncio
    async def test_non_2xx_is_a_normal_result(self) -> None:
        target = RecordingTarget(lambda request: httpx.Response(503, text="down for maintenance"))

        response = await WebhookExecutor(transport=target.transport).dispatch(_definition())

        assert response.status == 503
        assert response.status_text == "Service Unavailable"
        assert response.is_success is False
        assert response.body == TextBody(value="down for maintenance")

    @pytest.mark.asyncio
    async def test_connection_failure_is_transport_error(self) -> None:
        executor = WebhookExecutor(transport=httpx.MockTransport(unreachable))

        with pytest.raises(WebhookTransportError, match="Connection refused"):
            await executor.dispatch(_definition())

    @pytest.mark.asyncio
    async def test_non_ascii_header_never_reaches_the_wire(self) -> None:
        target = RecordingTarget()
        definition = {
            "url": "https://example.com/hook",
            "method": "POST",
            "headers": [{"key": "X-Name", "value": "café", "enabled": True}],
        }

        with pytest.raises(WebhookValidationError):
            await WebhookExecutor(transport=target.transport).dispatch(definition)

        assert target.requests == []

    @pytest.mark.asyncio
    async def test_unencodable_prepared_request_is_validation_error(self) -> None:
        """Requests built without build_request still fail with a classified error."""
        request = PreparedRequest(
            method="POST", url="https://example.com/hook", headers={"X-Name": "café"}, body=""
        )

        with pytest.raises(WebhookValidationError, match="could not be encoded"):
            await WebhookExecutor(transport=RecordingTarget().transport).send(request)

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self) -> None:
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        executor = WebhookExecutor(transport=httpx.MockTransport(slow))

        with pytest.raises(WebhookTransportError, match="timed out"):
            await executor.dispatch(_definition())


class TestExecute:
    """Execution with response recording."""

    @pytest.mark.asyncio
    async def test_round_trip_records_response(self, db_session: Session, webhook) -> None:
        target = RecordingTarget(lambda request: httpx.Response(200, json={"a": 1}))
        executor = WebhookExecutor(ResponseRepository(db_session), transport=target.transport)

        record = await executor.execute(webhook)

        assert record.status == 200
        assert record.status_text == "OK"
        assert record.data == {"a": 1}
        assert record.data_format == ResponseDataFormat.JSON
        assert record.webhook_id == webhook.id
        assert record.timestamp.isoformat()

        stored = db_session.get(WebhookResponse, record.id)
        assert stored is not None
        assert stored.data == {"a": 1}
        assert stored.status == 200

    @pytest.mark.asyncio
    async def test_each_execution_gets_a_fresh_id(self, db_session: Session, webhook, target) -> None:
        executor = WebhookExecutor(ResponseRepository(db_session), transport=target.transport)

        first = await executor.execute(webhook)
        second = await executor.execute(webhook)

        assert first.id != second.id
        assert len(ResponseRepository(db_session).list_by_webhook(webhook.id)) == 2

    @pytest.mark.asyncio
    async def test_unreachable_host_records_nothing(self, db_session: Session, webhook) -> None:
        executor = WebhookExecutor(ResponseRepository(db_session), transport=httpx.MockTransport(unreachable))

        with pytest.raises(WebhookTransportError):
            await executor.execute(webhook)

        assert len(ResponseRepository(db_session).list_by_webhook(webhook.id)) == 0

    @pytest.mark.asyncio
    async def test_store_failure_still_returns_response(self, webhook, target) -> None:
        store = MagicMock(spec=ResponseRepository)
        store.insert.side_effect = StoreWriteError("database is locked")
        executor = WebhookExecutor(store, transport=target.transport)

        record = await executor.execute(webhook)

        assert record.status == 200
        assert record.data == {"ok": True}
        store.insert.assert_called_once()

    @pytest.mark.asyncio
    async def test_payload_override_is_sent(self, db_session: Session, webhook, target) -> None:
        executor = WebhookExecutor(ResponseRepository(db_session), transport=target.transport)

        await executor.execute(webhook, json.dumps({"y": 2}))

        assert json.loads(target.last.content) == {"y": 2}
