"""FastAPI endpoints for the Catalogue domain."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain
from shared.retry import process_with_retry

from catalogue.api.schemas import (
    AddVariationRequest,
    CreateProductRequest,
    ProductIdResponse,
    ProductResponse,
    StatusResponse,
    UpdateProductDetailsRequest,
    UpdateProductStockRequest,
    UpdateVariationStockRequest,
    VariationIdResponse,
    VariationResponse,
)
from catalogue.product.creation import CreateProduct
from catalogue.product.details import UpdateProductDetails
from catalogue.product.product import Product
from catalogue.product.stock import AddVariation, UpdateProductStock, UpdateVariationStock

product_router = APIRouter(prefix="/products", tags=["products"])


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        slug=product.slug,
        sku=product.sku,
        description=product.description,
        product_type=product.product_type,
        status=product.status,
        manage_stock=product.manage_stock,
        allow_backorders=product.allow_backorders,
        warehouse_id=product.warehouse_id,
        reorder_point=product.reorder_point,
        available_sizes=product.available_sizes,
        size_inventory={s.size: s.quantity for s in product.size_inventory},
        variations=[
            VariationResponse(
                variation_id=str(v.id),
                sku=v.sku,
                price=v.price,
                sale_price=v.sale_price,
                attributes=json.loads(v.attributes) if v.attributes else None,
                stock_quantity=v.stock_quantity,
                stock_status=v.stock_status,
            )
            for v in product.variations
        ],
        stock_quantity=product.stock_quantity,
        stock_status=product.stock_status,
        in_stock=product.in_stock,
    )


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        slug=body.slug,
        sku=body.sku,
        description=body.description,
        product_type=body.product_type,
        status=body.status,
        manage_stock=body.manage_stock,
        allow_backorders=body.allow_backorders,
        warehouse_id=body.warehouse_id,
        reorder_point=body.reorder_point,
        stock_quantity=body.stock_quantity,
        size_inventory=json.dumps(body.size_inventory) if body.size_inventory is not None else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.put("/{product_id}/details", response_model=StatusResponse)
async def update_product_details(product_id: str, body: UpdateProductDetailsRequest) -> StatusResponse:
    command = UpdateProductDetails(
        product_id=product_id,
        name=body.name,
        slug=body.slug,
        description=body.description,
        status=body.status,
    )
    await process_with_retry(command)
    return StatusResponse()


@product_router.put("/{product_id}/stock", response_model=ProductResponse)
async def update_product_stock(product_id: str, body: UpdateProductStockRequest) -> ProductResponse:
    command = UpdateProductStock(
        product_id=product_id,
        stock_quantity=body.stock_quantity,
        size_inventory=json.dumps(body.size_inventory) if body.size_inventory is not None else None,
        allow_backorders=body.allow_backorders,
        manage_stock=body.manage_stock,
        warehouse_id=body.warehouse_id,
        reorder_point=body.reorder_point,
    )
    await process_with_retry(command)
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.post("/{product_id}/variations", status_code=201, response_model=VariationIdResponse)
async def add_variation(product_id: str, body: AddVariationRequest) -> VariationIdResponse:
    command = AddVariation(
        product_id=product_id,
        sku=body.sku,
        price=body.price,
        sale_price=body.sale_price,
        attributes=json.dumps(body.attributes) if body.attributes else None,
        stock_quantity=body.stock_quantity,
    )
    result = await process_with_retry(command)
    return VariationIdResponse(variation_id=result)


@product_router.put("/{product_id}/variations/{variation_id}/stock", response_model=StatusResponse)
async def update_variation_stock(
    product_id: str, variation_id: str, body: UpdateVariationStockRequest
) -> StatusResponse:
    command = UpdateVariationStock(
        product_id=product_id,
        variation_id=variation_id,
        stock_quantity=body.stock_quantity,
    )
    await process_with_retry(command)
    return StatusResponse()
