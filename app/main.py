"""FastAPI application exposing the product catalog resource."""
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Union

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_catalog.config import Settings
from product_catalog.service.access import is_authorized
from product_catalog.service.catalog_store import CatalogStore
from product_catalog.service.errors import CatalogValidationError, Unauthorized
from product_catalog.service.queries import add_product, delete_by_ids, get_by_id, search_by_title

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PRODUCTS_PATH = "/api/products"
ALLOWED_METHODS = "GET, POST, DELETE"
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, X-API-Key",
}
MISSING_PRODUCT_FIELDS = "Missing required fields: title and productUrl are required"
MISSING_DELETE_IDS = 'Request body must include an "ids" array with at least one product ID'

app = FastAPI(title="Product Catalog")
settings = Settings.from_env()
store = CatalogStore.from_settings(settings)


class ProductPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    product_url: str = Field(..., min_length=1, alias="productUrl")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    description: Optional[str] = None


class DeletePayload(BaseModel):
    ids: List[Union[str, int]] = Field(..., min_length=1)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


@app.exception_handler(Unauthorized)
async def unauthorized_handler(request: Request, exc: Unauthorized) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": "Invalid or missing API key"},
    )


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED and request.url.path == PRODUCTS_PATH:
        return PlainTextResponse(
            f"Method {request.method} Not Allowed",
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            headers={"Allow": ALLOWED_METHODS},
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(CatalogValidationError)
async def validation_handler(request: Request, exc: CatalogValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": str(exc)})


async def json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def require_api_key(request: Request, body: Any = Depends(json_body)) -> None:
    if not is_authorized(request.headers, request.query_params, body, settings):
        raise Unauthorized()


def _validated(model, body: Any, message: str):
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise CatalogValidationError(message) from exc


def _server_error(message: str, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": message, "error": str(exc)},
    )


@app.options(PRODUCTS_PATH)
def preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK)


@app.get(PRODUCTS_PATH)
def list_products(
    product_id: Optional[str] = Query(None, alias="id"),
    title: Optional[str] = None,
):
    try:
        if product_id:
            product = get_by_id(store, product_id)
            if product is None:
                return JSONResponse(
                    status_code=status.HTTP_404_NOT_FOUND,
                    content={"message": f"Product with ID {product_id} not found"},
                )
            return product
        if title:
            return search_by_title(store, title)
        return store.read_catalog()
    except Exception as exc:
        logger.exception("GET %s failed", PRODUCTS_PATH)
        return _server_error("Server error", exc)


@app.post(PRODUCTS_PATH, dependencies=[Depends(require_api_key)])
def create_product(body: Any = Depends(json_body)):
    payload = _validated(ProductPayload, body, MISSING_PRODUCT_FIELDS)

    try:
        product = add_product(
            store,
            title=payload.title,
            product_url=payload.product_url,
            image_url=payload.image_url,
            description=payload.description,
        )
    except Exception as exc:
        logger.exception("POST %s failed", PRODUCTS_PATH)
        return _server_error("Error adding product", exc)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=product.to_dict())


@app.delete(PRODUCTS_PATH, dependencies=[Depends(require_api_key)])
def delete_products(body: Any = Depends(json_body)):
    payload = _validated(DeletePayload, body, MISSING_DELETE_IDS)

    try:
        result = delete_by_ids(store, payload.ids)
    except Exception as exc:
        logger.exception("DELETE %s failed", PRODUCTS_PATH)
        return _server_error("Error deleting products", exc)
    return {"message": f"Successfully deleted {result.deleted_count} products", **result.to_dict()}

