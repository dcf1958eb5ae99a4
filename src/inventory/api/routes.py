"""FastAPI routes for the Inventory domain — stock records and warehouses.

Thin adapters that translate HTTP requests into domain commands. Writes that
can lose a version race go through process_with_retry.
"""

import json

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain
from shared.retry import process_with_retry

from inventory.api.schemas import (
    AddressSchema,
    AdjustStockRequest,
    CreateStockRecordRequest,
    CreateWarehouseRequest,
    InventoryIdResponse,
    MovementListResponse,
    MovementResponse,
    SetReservedStockRequest,
    StatusResponse,
    StockRecordListResponse,
    StockRecordResponse,
    StockStatsResponse,
    SyncFailureListResponse,
    SyncFailureResponse,
    TransferResponse,
    TransferStockRequest,
    UpdateStockRecordRequest,
    UpdateWarehouseRequest,
    WarehouseIdResponse,
    WarehouseListResponse,
    WarehouseResponse,
)
from inventory.projections.stock_movement import movements_for
from inventory.projections.sync_failures import sync_failures_for
from inventory.stock.adjustment import AdjustStock, SetReservedStock
from inventory.stock.creation import CreateStockRecord
from inventory.stock.management import DeleteStockRecord, UpdateStockRecord
from inventory.stock.record import StockRecord
from inventory.stock.transfer import TransferStock
from inventory.warehouse.management import (
    CreateWarehouse,
    DeactivateWarehouse,
    MarkDefaultWarehouse,
    UpdateWarehouse,
)
from inventory.warehouse.warehouse import Warehouse


def _iso(value):
    return value.isoformat() if value else None


def _record_response(record) -> StockRecordResponse:
    return StockRecordResponse(
        inventory_id=str(record.id),
        product_id=str(record.product_id),
        variation_id=str(record.variation_id) if record.variation_id else None,
        size=record.size,
        warehouse_id=str(record.warehouse_id),
        current_stock=record.current_stock,
        reserved_stock=record.reserved_stock,
        available_stock=record.available_stock,
        reorder_point=record.reorder_point,
        reorder_quantity=record.reorder_quantity,
        max_stock=record.max_stock,
        allow_backorders=record.allow_backorders,
        status=record.status,
        last_restocked=_iso(record.last_restocked),
        last_sold=_iso(record.last_sold),
        version=record._version,
    )


def _load_record(inventory_id: str) -> StockRecordResponse:
    return _record_response(current_domain.repository_for(StockRecord).get(inventory_id))


# ---------------------------------------------------------------------------
# Inventory Router
# ---------------------------------------------------------------------------
inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


@inventory_router.post("", status_code=201, response_model=InventoryIdResponse)
async def create_stock_record(body: CreateStockRecordRequest) -> InventoryIdResponse:
    command = CreateStockRecord(
        product_id=body.product_id,
        variation_id=body.variation_id,
        size=body.size,
        warehouse_id=body.warehouse_id,
        current_stock=body.current_stock,
        reserved_stock=body.reserved_stock,
        reorder_point=body.reorder_point,
        reorder_quantity=body.reorder_quantity,
        max_stock=body.max_stock,
        allow_backorders=body.allow_backorders,
    )
    result = current_domain.process(command, asynchronous=False)
    return InventoryIdResponse(inventory_id=result)


@inventory_router.get("", response_model=StockRecordListResponse)
async def list_stock_records(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> StockRecordListResponse:
    repo = current_domain.repository_for(StockRecord)
    records, total = repo.list_page(offset=(page - 1) * limit, limit=limit)
    return StockRecordListResponse(
        items=[_record_response(r) for r in records],
        total=total,
        page=page,
        limit=limit,
    )


@inventory_router.get("/low-stock", response_model=list[StockRecordResponse])
async def low_stock() -> list[StockRecordResponse]:
    return [_record_response(r) for r in current_domain.repository_for(StockRecord).low_stock()]


@inventory_router.get("/out-of-stock", response_model=list[StockRecordResponse])
async def out_of_stock() -> list[StockRecordResponse]:
    return [_record_response(r) for r in current_domain.repository_for(StockRecord).out_of_stock()]


@inventory_router.get("/stats", response_model=StockStatsResponse)
async def stock_stats() -> StockStatsResponse:
    return StockStatsResponse(**current_domain.repository_for(StockRecord).stats())


@inventory_router.get("/sync-failures", response_model=SyncFailureListResponse)
async def list_sync_failures(product_id: str | None = None) -> SyncFailureListResponse:
    return SyncFailureListResponse(
        failures=[
            SyncFailureResponse(
                failure_id=str(f.failure_id),
                direction=f.direction,
                product_id=str(f.product_id) if f.product_id else None,
                error=f.error,
                occurred_at=f.occurred_at.isoformat(),
            )
            for f in sync_failures_for(product_id)
        ]
    )


@inventory_router.get("/product/{product_id}", response_model=list[StockRecordResponse])
async def stock_for_product(product_id: str, size: str | None = None) -> list[StockRecordResponse]:
    records = current_domain.repository_for(StockRecord).find_by_product(product_id, size=size)
    return [_record_response(r) for r in records]


@inventory_router.get("/{inventory_id}", response_model=StockRecordResponse)
async def get_stock_record(inventory_id: str) -> StockRecordResponse:
    return _load_record(inventory_id)


@inventory_router.patch("/{inventory_id}", response_model=StockRecordResponse)
async def update_stock_record(inventory_id: str, body: UpdateStockRecordRequest) -> StockRecordResponse:
    command = UpdateStockRecord(
        inventory_id=inventory_id,
        current_stock=body.current_stock,
        reorder_point=body.reorder_point,
        reorder_quantity=body.reorder_quantity,
        max_stock=body.max_stock,
        discontinued=body.discontinued,
        notes=body.notes,
    )
    await process_with_retry(command)
    return _load_record(inventory_id)


@inventory_router.delete("/{inventory_id}", response_model=StatusResponse)
async def delete_stock_record(inventory_id: str) -> StatusResponse:
    current_domain.process(DeleteStockRecord(inventory_id=inventory_id), asynchronous=False)
    return StatusResponse()


@inventory_router.post("/{inventory_id}/adjust", response_model=StockRecordResponse)
async def adjust_stock(inventory_id: str, body: AdjustStockRequest) -> StockRecordResponse:
    command = AdjustStock(
        inventory_id=inventory_id,
        quantity=body.quantity,
        type=body.type,
        reference_id=body.reference_id,
        reference_type=body.reference_type,
        notes=body.notes,
    )
    await process_with_retry(command)
    return _load_record(inventory_id)


@inventory_router.put("/{inventory_id}/reserved", response_model=StockRecordResponse)
async def set_reserved_stock(inventory_id: str, body: SetReservedStockRequest) -> StockRecordResponse:
    await process_with_retry(SetReservedStock(inventory_id=inventory_id, reserved_stock=body.reserved_stock))
    return _load_record(inventory_id)


@inventory_router.post("/{inventory_id}/transfer", response_model=TransferResponse)
async def transfer_stock(inventory_id: str, body: TransferStockRequest) -> TransferResponse:
    command = TransferStock(
        inventory_id=inventory_id,
        to_warehouse=body.to_warehouse,
        quantity=body.quantity,
        notes=body.notes,
    )
    result = await process_with_retry(command)
    return TransferResponse(source=_load_record(result["from"]), destination=_load_record(result["to"]))


@inventory_router.get("/{inventory_id}/movements", response_model=MovementListResponse)
async def list_movements(inventory_id: str) -> MovementListResponse:
    current_domain.repository_for(StockRecord).get(inventory_id)
    return MovementListResponse(
        movements=[
            MovementResponse(
                movement_id=str(m.movement_id),
                inventory_id=str(m.inventory_id),
                type=m.type,
                quantity=m.quantity,
                previous_stock=m.previous_stock,
                new_stock=m.new_stock,
                reference_id=m.reference_id,
                reference_type=m.reference_type,
                notes=m.notes,
                created_at=m.created_at.isoformat(),
            )
            for m in movements_for(inventory_id)
        ]
    )


# ---------------------------------------------------------------------------
# Warehouse Router
# ---------------------------------------------------------------------------
warehouse_router = APIRouter(prefix="/warehouses", tags=["warehouses"])


def _warehouse_response(warehouse) -> WarehouseResponse:
    return WarehouseResponse(
        warehouse_id=str(warehouse.id),
        name=warehouse.name,
        code=warehouse.code,
        address=AddressSchema(**warehouse.address.to_dict()) if warehouse.address else None,
        contact_person=warehouse.contact_person,
        phone=warehouse.phone,
        email=warehouse.email,
        is_active=warehouse.is_active,
        is_default=warehouse.is_default,
    )


@warehouse_router.post("", status_code=201, response_model=WarehouseIdResponse)
async def create_warehouse(body: CreateWarehouseRequest) -> WarehouseIdResponse:
    command = CreateWarehouse(
        name=body.name,
        code=body.code,
        address=json.dumps(body.address.model_dump()),
        contact_person=body.contact_person,
        phone=body.phone,
        email=body.email,
        is_default=body.is_default,
    )
    result = current_domain.process(command, asynchronous=False)
    return WarehouseIdResponse(warehouse_id=result)


@warehouse_router.get("", response_model=WarehouseListResponse)
async def list_warehouses(active_only: bool = False) -> WarehouseListResponse:
    warehouses = current_domain.repository_for(Warehouse)._dao.query.all().items
    if active_only:
        warehouses = [w for w in warehouses if w.is_active]
    return WarehouseListResponse(warehouses=[_warehouse_response(w) for w in warehouses])


@warehouse_router.get("/{warehouse_id}", response_model=WarehouseResponse)
async def get_warehouse(warehouse_id: str) -> WarehouseResponse:
    return _warehouse_response(current_domain.repository_for(Warehouse).get(warehouse_id))


@warehouse_router.put("/{warehouse_id}", response_model=StatusResponse)
async def update_warehouse(warehouse_id: str, body: UpdateWarehouseRequest) -> StatusResponse:
    command = UpdateWarehouse(
        warehouse_id=warehouse_id,
        name=body.name,
        address=json.dumps(body.address.model_dump()) if body.address else None,
        contact_person=body.contact_person,
        phone=body.phone,
        email=body.email,
    )
    await process_with_retry(command)
    return StatusResponse()


@warehouse_router.put("/{warehouse_id}/default", response_model=StatusResponse)
async def mark_default_warehouse(warehouse_id: str) -> StatusResponse:
    await process_with_retry(MarkDefaultWarehouse(warehouse_id=warehouse_id))
    return StatusResponse()


@warehouse_router.put("/{warehouse_id}/deactivate", response_model=StatusResponse)
async def deactivate_warehouse(warehouse_id: str) -> StatusResponse:
    await process_with_retry(DeactivateWarehouse(warehouse_id=warehouse_id))
    return StatusResponse()
