"""Tests for the operation endpoint."""

import pytest
from unittest.mock import AsyncMock, patch

from api.graphql import handler, parse_request_body
from src.services.dispatcher import execute, list_operations
from tests.utils.factories import create_property_data
from tests.utils.helpers import build_handler, create_operation_body, read_json_response


@pytest.fixture
def loaded_services():
    """Skip the store probe and route requests to the real dispatcher."""
    with patch("api.graphql._load_services", return_value=True), \
         patch("api.graphql._execute", execute), \
         patch("api.graphql._list_operations", list_operations):
        yield


# ---------------- parse_request_body ----------------

@pytest.mark.unit
def test_parse_request_body():
    assert parse_request_body(create_operation_body("geoZone", {"id": "n1"})) == ("geoZone", {"id": "n1"})
    assert parse_request_body('{"operationName": "geoZones"}') == ("geoZones", {})


@pytest.mark.unit
@pytest.mark.parametrize("raw, message", [
    ("", "operationName is required"),
    ("{not json", "not valid JSON"),
    ("[1, 2]", "must be a JSON object"),
    ('{"operationName": 5}', "operationName is required"),
    ('{"operationName": "geoZones", "variables": [1]}', "variables must be"),
])
def test_parse_request_body_rejects(raw, message):
    with pytest.raises(ValueError, match=message):
        parse_request_body(raw)


# ---------------- handler ----------------

@pytest.mark.unit
def test_post_runs_operation(global_store, loaded_services):
    prop = global_store.properties.seed(create_property_data(sqft=900))
    h = build_handler(handler, body=create_operation_body("listedProperty", {"id": prop["id"]}))

    h.do_POST()

    h.send_response.assert_called_once_with(200)
    body = read_json_response(h)
    assert body["data"]["listedProperty"]["_id"] == prop["id"]
    assert body["data"]["listedProperty"]["areaSqFt"] == 900


@pytest.mark.unit
def test_post_reports_operation_errors_in_envelope(global_store, loaded_services):
    h = build_handler(handler, body=create_operation_body("estateValue", {"propertyId": "missing"}))

    h.do_POST()

    h.send_response.assert_called_once_with(200)
    body = read_json_response(h)
    assert body["data"] == {"estateValue": None}
    assert body["errors"][0]["extensions"]["code"] == "NOT_FOUND"


@pytest.mark.unit
def test_post_echoes_correlation_id(global_store, loaded_services):
    h = build_handler(
        handler,
        body=create_operation_body("geoZones"),
        headers={"X-Correlation-ID": "req_abc123"},
    )

    h.do_POST()

    h.send_header.assert_any_call("X-Correlation-ID", "req_abc123")


@pytest.mark.unit
def test_post_malformed_body_is_400():
    h = build_handler(handler, body="{broken")

    h.do_POST()

    h.send_response.assert_called_once_with(400)
    body = read_json_response(h)
    assert body["errors"][0]["extensions"]["code"] == "BAD_REQUEST"


@pytest.mark.unit
def test_post_service_unavailable_is_500():
    with patch("api.graphql._load_services", return_value=False):
        h = build_handler(handler, body=create_operation_body("geoZones"))
        h.do_POST()

    h.send_response.assert_called_once_with(500)
    assert read_json_response(h)["errors"][0]["extensions"]["code"] == "STORE_UNAVAILABLE"


@pytest.mark.unit
def test_post_passes_configured_timeout():
    envelope = {"data": {"geoZones": []}}
    fake_execute = AsyncMock(return_value=envelope)

    with patch("api.graphql._load_services", return_value=True), \
         patch("api.graphql._execute", fake_execute):
        h = build_handler(handler, body=create_operation_body("geoZones", {"expand": []}))
        h.do_POST()

    fake_execute.assert_awaited_once_with("geoZones", {"expand": []}, timeout=10)
    assert read_json_response(h) == envelope


@pytest.mark.unit
def test_get_lists_operations(loaded_services):
    h = build_handler(handler, method="GET")

    h.do_GET()

    body = read_json_response(h)
    assert body["endpoint"] == "graphql"
    assert "listedProperties" in body["operations"]["query"]
