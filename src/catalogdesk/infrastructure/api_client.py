"""httpx-backed resource clients for the catalog REST API."""

from __future__ import annotations

import io
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx
from PIL import Image, UnidentifiedImageError

from catalogdesk.config import (
    CATEGORIES_PATH,
    DEFAULT_TIMEOUT_SEC,
    PRODUCT_UPLOAD_PATH,
    PRODUCTS_PATH,
    USER_AGENT,
)
from catalogdesk.domain.models import Category, ImageRef, Product, ProductPayload, QueryState
from catalogdesk.domain.repositories import ICategoryRepository, IProductRepository
from catalogdesk.errors import NetworkError, ServerError, ValidationError
from catalogdesk.infrastructure.envelope import decode_list, unwrap_object

LOGGER = logging.getLogger(__name__)

_VALIDATION_STATUSES = frozenset({400, 422})


def clean_params(params: Mapping[str, Any]) -> Dict[str, str]:
    """Drop unset axes and render the rest as query-string values.

    ``None`` marks an axis the caller wants omitted; it is removed here rather
    than being sent as a literal ``"None"``/``"undefined"``.
    """

    cleaned: Dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        elif isinstance(value, str):
            if not value:
                continue
            cleaned[key] = value
        else:
            cleaned[key] = str(value)
    return cleaned


def _error_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return fallback


class ApiTransport:
    """Thin wrapper over :class:`httpx.Client` translating failures.

    Every error leaves this class as a :class:`ResourceClientError` subclass
    with the underlying exception attached; nothing is retried here.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        files: Any = None,
    ) -> Any:
        query = clean_params(params) if params else None
        try:
            response = self._client.request(method, path, params=query, json=json, files=files)
        except httpx.TimeoutException as exc:
            LOGGER.warning("%s %s timed out: %s", method, path, exc)
            raise NetworkError(f"Request to {path} timed out", cause=exc) from exc
        except httpx.TransportError as exc:
            LOGGER.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError(f"Could not reach {path}: {exc}", cause=exc) from exc

        payload = self._decode(response)
        if response.is_success:
            return payload

        message = _error_message(payload, f"HTTP {response.status_code} for {method} {path}")
        status_error = httpx.HTTPStatusError(message, request=response.request, response=response)
        error_cls = ValidationError if response.status_code in _VALIDATION_STATUSES else ServerError
        LOGGER.info("%s %s answered %d: %s", method, path, response.status_code, message)
        raise error_cls(
            message,
            status_code=response.status_code,
            payload=payload,
            cause=status_error,
        ) from status_error

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            if response.is_success:
                raise ServerError(
                    "Response body is not valid JSON",
                    status_code=response.status_code,
                    cause=exc,
                ) from exc
            return None

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ApiTransport:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _require_object(body: Any, what: str) -> dict:
    record = unwrap_object(body)
    if record is None:
        raise ServerError(f"Unexpected response shape for {what}", payload=body)
    return record


class ProductApiClient(IProductRepository):
    """Resource client for ``/products`` and product image uploads."""

    def __init__(self, transport: ApiTransport) -> None:
        self._transport = transport

    def list(self, query: QueryState) -> List[Product]:
        body = self._transport.request("GET", PRODUCTS_PATH, params=query.to_request_params())
        decoded = decode_list(body, "products")
        LOGGER.debug("Decoded %d products from %s envelope", len(decoded.items), decoded.shape.value)
        return [Product.from_payload(item) for item in decoded.items]

    def get_one(self, product_id: Any) -> Product:
        body = self._transport.request("GET", f"{PRODUCTS_PATH}/{product_id}")
        return Product.from_payload(_require_object(body, f"product {product_id}"))

    def create(self, payload: ProductPayload) -> Product:
        payload.validate()
        body = self._transport.request("POST", PRODUCTS_PATH, json=payload.to_json())
        return Product.from_payload(_require_object(body, "created product"))

    def update(
        self,
        product_id: Any,
        payload: Union[ProductPayload, Mapping[str, Any]],
    ) -> Product:
        if isinstance(payload, ProductPayload):
            payload.validate(partial=True)
            body_json = payload.to_json()
        else:
            body_json = dict(payload)
        body = self._transport.request("PUT", f"{PRODUCTS_PATH}/{product_id}", json=body_json)
        return Product.from_payload(_require_object(body, f"product {product_id}"))

    def delete(self, product_id: Any) -> None:
        self._transport.request("DELETE", f"{PRODUCTS_PATH}/{product_id}")

    def upload_image(self, data: bytes) -> ImageRef:
        image_format = sniff_image_format(data)
        filename = f"product.{image_format.lower()}"
        content_type = Image.MIME.get(image_format, "application/octet-stream")
        body = self._transport.request(
            "POST",
            PRODUCT_UPLOAD_PATH,
            files={"image": (filename, data, content_type)},
        )
        record = unwrap_object(body) or {}
        url = record.get("url")
        if not isinstance(url, str) or not url:
            raise ServerError("Upload response did not contain an image URL", payload=body)
        return ImageRef(url=url)


def sniff_image_format(data: bytes) -> str:
    """Return Pillow's format name for *data* or raise ``ValidationError``."""

    if not data:
        raise ValidationError("Image file is empty")
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValidationError("File is not a supported image", cause=exc) from exc
    if not image_format:
        raise ValidationError("File is not a supported image")
    return image_format


class CategoryApiClient(ICategoryRepository):
    def __init__(self, transport: ApiTransport) -> None:
        self._transport = transport

    def list_active(self) -> List[Category]:
        body = self._transport.request("GET", CATEGORIES_PATH, params={"isActive": True})
        decoded = decode_list(body, "categories")
        return [Category.from_payload(item) for item in decoded.items]
