"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Classic Black T-Shirt",
                    "slug": "classic-black-tshirt",
                    "sku": "TSHIRT-BLK",
                    "description": "Premium cotton crew-neck tee in black.",
                    "product_type": "simple",
                    "manage_stock": True,
                    "allow_backorders": False,
                    "warehouse_id": "main",
                    "size_inventory": {"S": 10, "M": 0},
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    slug: str = Field(..., max_length=200)
    sku: str = Field(..., max_length=50)
    description: str | None = None
    product_type: str | None = Field(None, pattern="^(simple|variable|grouped|external)$")
    status: str | None = Field(None, pattern="^(draft|published|archived)$")
    manage_stock: bool = True
    allow_backorders: bool = False
    warehouse_id: str | None = Field(None, max_length=50)
    reorder_point: int = Field(10, ge=0)
    stock_quantity: int = Field(0, ge=0)
    size_inventory: dict[str, int] | None = None


class UpdateProductDetailsRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    slug: str | None = Field(None, max_length=200)
    description: str | None = None
    status: str | None = Field(None, pattern="^(draft|published|archived)$")


class UpdateProductStockRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "size_inventory": {"S": 8, "L": 4},
                    "allow_backorders": True,
                }
            ]
        }
    }

    stock_quantity: int | None = Field(None, ge=0)
    size_inventory: dict[str, int] | None = None
    allow_backorders: bool | None = None
    manage_stock: bool | None = None
    warehouse_id: str | None = Field(None, max_length=50)
    reorder_point: int | None = Field(None, ge=0)


class AddVariationRequest(BaseModel):
    sku: str = Field(..., max_length=50)
    price: float = Field(..., ge=0)
    sale_price: float | None = Field(None, ge=0)
    attributes: dict[str, str] | None = None
    stock_quantity: int = Field(0, ge=0)


class UpdateVariationStockRequest(BaseModel):
    stock_quantity: int = Field(..., ge=0)


# --- Response Schemas ---


class ProductIdResponse(BaseModel):
    product_id: str


class VariationIdResponse(BaseModel):
    variation_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class VariationResponse(BaseModel):
    variation_id: str
    sku: str
    price: float
    sale_price: float | None = None
    attributes: dict | None = None
    stock_quantity: int
    stock_status: str


class ProductResponse(BaseModel):
    product_id: str
    name: str
    slug: str
    sku: str
    description: str | None = None
    product_type: str
    status: str
    manage_stock: bool
    allow_backorders: bool
    warehouse_id: str
    reorder_point: int
    available_sizes: list[str]
    size_inventory: dict[str, int]
    variations: list[VariationResponse]
    stock_quantity: int
    stock_status: str
    in_stock: bool
