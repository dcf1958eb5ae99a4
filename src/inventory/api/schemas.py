"""Pydantic request/response schemas for the Inventory API.

These are external contracts (anti-corruption layer), kept separate from
the internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str | None = None
    postal_code: str
    country: str


# ---------------------------------------------------------------------------
# Stock Request Schemas
# ---------------------------------------------------------------------------
class CreateStockRecordRequest(BaseModel):
    product_id: str
    variation_id: str | None = None
    size: str | None = None
    warehouse_id: str
    current_stock: int = Field(ge=0, default=0)
    reserved_stock: int = Field(ge=0, default=0)
    reorder_point: int = Field(ge=0, default=10)
    reorder_quantity: int = Field(ge=0, default=50)
    max_stock: int | None = Field(default=None, ge=0)
    allow_backorders: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "size": "M",
                    "warehouse_id": "main",
                    "current_stock": 20,
                    "reorder_point": 5,
                }
            ]
        }
    }


class AdjustStockRequest(BaseModel):
    quantity: int
    type: str | None = Field(default=None, pattern="^(IN|OUT)$")
    reference_id: str | None = None
    reference_type: str | None = None
    notes: str | None = None


class SetReservedStockRequest(BaseModel):
    reserved_stock: int = Field(ge=0)


class UpdateStockRecordRequest(BaseModel):
    current_stock: int | None = Field(default=None, ge=0)
    reorder_point: int | None = Field(default=None, ge=0)
    reorder_quantity: int | None = Field(default=None, ge=0)
    max_stock: int | None = Field(default=None, ge=0)
    discontinued: bool | None = None
    notes: str | None = None


class TransferStockRequest(BaseModel):
    to_warehouse: str
    quantity: int = Field(ge=1)
    notes: str | None = None


# ---------------------------------------------------------------------------
# Warehouse Request Schemas
# ---------------------------------------------------------------------------
class CreateWarehouseRequest(BaseModel):
    name: str
    code: str = Field(min_length=1, max_length=50)
    address: AddressSchema
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    is_default: bool = False


class UpdateWarehouseRequest(BaseModel):
    name: str | None = None
    address: AddressSchema | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class InventoryIdResponse(BaseModel):
    inventory_id: str


class WarehouseIdResponse(BaseModel):
    warehouse_id: str


class StockRecordResponse(BaseModel):
    inventory_id: str
    product_id: str
    variation_id: str | None = None
    size: str | None = None
    warehouse_id: str
    current_stock: int
    reserved_stock: int
    available_stock: int
    reorder_point: int
    reorder_quantity: int
    max_stock: int | None = None
    allow_backorders: bool
    status: str
    last_restocked: str | None = None
    last_sold: str | None = None
    version: int


class StockRecordListResponse(BaseModel):
    items: list[StockRecordResponse]
    total: int
    page: int
    limit: int


class StockStatsResponse(BaseModel):
    total: int
    low_stock: int
    out_of_stock: int
    in_stock: int
    discontinued: int


class TransferResponse(BaseModel):
    source: StockRecordResponse
    destination: StockRecordResponse


class MovementResponse(BaseModel):
    movement_id: str
    inventory_id: str
    type: str
    quantity: int
    previous_stock: int
    new_stock: int
    reference_id: str | None = None
    reference_type: str | None = None
    notes: str | None = None
    created_at: str


class MovementListResponse(BaseModel):
    movements: list[MovementResponse]


class SyncFailureResponse(BaseModel):
    failure_id: str
    direction: str
    product_id: str | None = None
    error: str | None = None
    occurred_at: str


class SyncFailureListResponse(BaseModel):
    failures: list[SyncFailureResponse]


class WarehouseResponse(BaseModel):
    warehouse_id: str
    name: str
    code: str
    address: AddressSchema | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    is_active: bool
    is_default: bool


class WarehouseListResponse(BaseModel):
    warehouses: list[WarehouseResponse]
