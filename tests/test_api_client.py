"""Tests for the httpx-backed resource clients."""

from __future__ import annotations

import io
import json
from decimal import Decimal

import httpx
import pytest
from PIL import Image

from catalogdesk.domain.models import ActiveFilter, ProductPayload, QueryState, SortOrder
from catalogdesk.errors import NetworkError, ResourceClientError, ServerError, ValidationError
from catalogdesk.infrastructure.api_client import (
    ApiTransport,
    CategoryApiClient,
    ProductApiClient,
    clean_params,
    sniff_image_format,
)

BASE_URL = "http://api.test/api"

PRODUCT_JSON = {
    "id": 7,
    "name": "Running shoe",
    "description": "Light",
    "price": "59.90",
    "stock": 12,
    "categoryId": 5,
    "imageUrl": None,
    "isActive": True,
    "createdAt": "2024-03-01T10:00:00Z",
}


class Recorder:
    """MockTransport handler that records requests and replays a response."""

    def __init__(self, response=None, *, status=200, exc=None):
        self.requests: list[httpx.Request] = []
        self._response = response
        self._status = status
        self._exc = exc

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._exc is not None:
            raise self._exc
        if self._response is None:
            return httpx.Response(self._status)
        return httpx.Response(self._status, json=self._response)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _client(recorder: Recorder, **kwargs) -> ProductApiClient:
    transport = ApiTransport(BASE_URL, transport=httpx.MockTransport(recorder), **kwargs)
    return ProductApiClient(transport)


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), "red").save(buffer, format="PNG")
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Query serialization
# ---------------------------------------------------------------------------


def test_default_query_omits_every_all_axis():
    recorder = Recorder([])
    _client(recorder).list(QueryState())

    params = dict(recorder.last.url.params)
    assert params == {"sortBy": "name", "sortOrder": "ASC"}
    assert "all" not in str(recorder.last.url)
    assert "undefined" not in str(recorder.last.url)
    assert "None" not in str(recorder.last.url)


def test_filters_are_serialized():
    recorder = Recorder([])
    query = QueryState(
        search_text="shoes",
        active_filter=ActiveFilter.INACTIVE,
        category_filter=5,
        sort_order=SortOrder.DESC,
    )
    _client(recorder).list(query)

    params = dict(recorder.last.url.params)
    assert params == {
        "search": "shoes",
        "isActive": "false",
        "categoryId": "5",
        "sortBy": "name",
        "sortOrder": "DESC",
    }
    assert recorder.last.url.path == "/api/products"


def test_clean_params_drops_none_and_empty_strings():
    assert clean_params({"a": None, "b": "", "c": True, "d": 0}) == {"c": "true", "d": "0"}


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "body",
    [
        {"success": True, "data": {"products": [PRODUCT_JSON], "pagination": {"total": 1}}},
        {"products": [PRODUCT_JSON]},
        [PRODUCT_JSON],
    ],
)
def test_list_normalizes_envelopes(body):
    products = _client(Recorder(body)).list(QueryState())

    assert len(products) == 1
    product = products[0]
    assert product.id == 7
    assert product.price == Decimal("59.90")
    assert product.category_id == 5
    assert product.created_at.year == 2024


@pytest.mark.parametrize("body", [{"data": {"products": []}}, {"products": []}, []])
def test_empty_listing_is_an_empty_list(body):
    assert _client(Recorder(body)).list(QueryState()) == []


def test_unrecognized_listing_is_empty_not_an_error():
    assert _client(Recorder({"items": [PRODUCT_JSON]})).list(QueryState()) == []


def test_empty_body_listing_is_empty():
    assert _client(Recorder(None)).list(QueryState()) == []


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------


def test_server_error_carries_status_payload_and_cause():
    recorder = Recorder({"success": False, "message": "boom"}, status=500)

    with pytest.raises(ServerError) as info:
        _client(recorder).list(QueryState())

    error = info.value
    assert not isinstance(error, ValidationError)
    assert error.status_code == 500
    assert error.payload == {"success": False, "message": "boom"}
    assert str(error) == "boom"
    assert isinstance(error.cause, httpx.HTTPStatusError)
    assert error.__cause__ is error.cause


@pytest.mark.parametrize("status", [400, 422])
def test_validation_statuses_map_to_validation_error(status):
    with pytest.raises(ValidationError) as info:
        _client(Recorder({"error": "name required"}, status=status)).update(1, {"name": ""})

    assert info.value.status_code == status
    assert str(info.value) == "name required"


def test_connect_error_becomes_network_error():
    recorder = Recorder(exc=httpx.ConnectError("refused"))

    with pytest.raises(NetworkError) as info:
        _client(recorder).list(QueryState())

    assert isinstance(info.value.cause, httpx.ConnectError)
    assert isinstance(info.value, ResourceClientError)


def test_timeout_becomes_network_error():
    with pytest.raises(NetworkError):
        _client(Recorder(exc=httpx.ReadTimeout("slow"))).get_one(1)


def test_invalid_json_on_success_is_server_error():
    def handler(request):
        return httpx.Response(200, content=b"<html>")

    client = ProductApiClient(ApiTransport(BASE_URL, transport=httpx.MockTransport(handler)))
    with pytest.raises(ServerError):
        client.list(QueryState())


# ---------------------------------------------------------------------------
# Single records and mutations
# ---------------------------------------------------------------------------


def test_get_one_unwraps_data_envelope():
    recorder = Recorder({"success": True, "data": PRODUCT_JSON})

    product = _client(recorder).get_one(7)

    assert product.name == "Running shoe"
    assert recorder.last.url.path == "/api/products/7"


def test_create_posts_payload_verbatim():
    recorder = Recorder(PRODUCT_JSON, status=201)
    payload = ProductPayload(
        name="Running shoe",
        description="Light",
        price=Decimal("59.90"),
        stock=12,
        category_id=5,
        is_active=True,
    )

    created = _client(recorder).create(payload)

    assert created.id == 7
    assert recorder.last.method == "POST"
    assert json.loads(recorder.last.content) == {
        "name": "Running shoe",
        "description": "Light",
        "price": 59.9,
        "stock": 12,
        "categoryId": 5,
        "isActive": True,
    }


def test_create_rejects_invalid_payload_without_request():
    recorder = Recorder(PRODUCT_JSON)

    with pytest.raises(ValidationError):
        _client(recorder).create(ProductPayload(name="Shoe", price=Decimal("-1")))
    with pytest.raises(ValidationError):
        _client(recorder).create(ProductPayload(price=Decimal("1")))

    assert recorder.requests == []


def test_update_sends_partial_body():
    recorder = Recorder(PRODUCT_JSON)

    _client(recorder).update(7, {"isActive": False})

    assert recorder.last.method == "PUT"
    assert recorder.last.url.path == "/api/products/7"
    assert json.loads(recorder.last.content) == {"isActive": False}


def test_update_with_payload_only_sends_set_fields():
    recorder = Recorder(PRODUCT_JSON)

    _client(recorder).update(7, ProductPayload(stock=3))

    assert json.loads(recorder.last.content) == {"stock": 3}


def test_full_edit_sends_cleared_fields_as_null():
    recorder = Recorder(PRODUCT_JSON)
    payload = ProductPayload(
        name="Shoe",
        price=Decimal("1"),
        stock=1,
        category_id=None,
        image_url=None,
        is_active=True,
    )

    _client(recorder).update(1, payload)

    assert json.loads(recorder.last.content) == {
        "name": "Shoe",
        "price": 1.0,
        "stock": 1,
        "categoryId": None,
        "imageUrl": None,
        "isActive": True,
    }


def test_untouched_fields_are_omitted():
    assert ProductPayload(name="Shoe").to_json() == {"name": "Shoe"}
    assert ProductPayload(image_url=None).to_json() == {"imageUrl": None}


def test_partial_update_rejects_blank_name():
    recorder = Recorder(PRODUCT_JSON)

    with pytest.raises(ValidationError):
        _client(recorder).update(1, ProductPayload(name="  "))

    assert recorder.requests == []


def test_delete_accepts_empty_response():
    recorder = Recorder(None, status=204)

    assert _client(recorder).delete(7) is None
    assert recorder.last.method == "DELETE"


def test_token_is_sent_as_bearer_header():
    recorder = Recorder([])

    _client(recorder, token="secret").list(QueryState())

    assert recorder.last.headers["Authorization"] == "Bearer secret"


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


def test_upload_image_posts_multipart_field():
    recorder = Recorder({"url": "https://cdn.example.com/p.png"})

    ref = _client(recorder).upload_image(_png_bytes())

    assert ref.url == "https://cdn.example.com/p.png"
    request = recorder.last
    assert request.url.path == "/api/upload/product"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="image"' in request.content
    assert b'filename="product.png"' in request.content


def test_upload_image_reads_wrapped_url():
    ref = _client(Recorder({"data": {"url": "https://cdn.example.com/x.png"}})).upload_image(_png_bytes())
    assert ref.url == "https://cdn.example.com/x.png"


def test_upload_rejects_non_image_before_request():
    recorder = Recorder({"url": "x"})

    with pytest.raises(ValidationError):
        _client(recorder).upload_image(b"not an image")

    assert recorder.requests == []


def test_upload_without_url_is_server_error():
    with pytest.raises(ServerError):
        _client(Recorder({"ok": True})).upload_image(_png_bytes())


def test_sniff_image_format():
    assert sniff_image_format(_png_bytes()) == "PNG"
    with pytest.raises(ValidationError):
        sniff_image_format(b"")


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


def test_categories_request_active_only():
    recorder = Recorder({"data": {"categories": [{"id": 5, "name": "Shoes", "icon": "👟"}]}})
    client = CategoryApiClient(ApiTransport(BASE_URL, transport=httpx.MockTransport(recorder)))

    categories = client.list_active()

    assert dict(recorder.last.url.params) == {"isActive": "true"}
    assert recorder.last.url.path == "/api/categories"
    assert categories[0].label == "👟 Shoes"
