"""Product aggregate root with ProductVariation and SizeStock entities.

Stock fields fall in two groups:

    merchant-owned:  size_inventory, variation stock_quantity, manage_stock,
                     allow_backorders, warehouse_id, reorder_point
    denormalized:    stock_quantity, stock_status, in_stock; a cache of the
                     stock ledger refreshed by inventory-to-product sync

Every change to a merchant-owned field raises ProductStockUpdated, which the
inventory context consumes. Refreshes from the ledger raise ProductStockSynced
instead, so the two contexts never echo each other's updates.
"""

import json
import re
from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from catalogue.domain import catalogue

_SKU_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")
_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class DuplicateProduct(ValidationError):
    """A product with the same slug or SKU already exists."""


class ProductType(Enum):
    SIMPLE = "simple"
    VARIABLE = "variable"
    GROUPED = "grouped"
    EXTERNAL = "external"


class ProductStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ProductStockStatus(Enum):
    """Product-facing stock status shown to shoppers."""

    INSTOCK = "instock"
    OUTOFSTOCK = "outofstock"
    ONBACKORDER = "onbackorder"


def to_product_stock_status(status, allow_backorders=False):
    """Translate a ledger stock status into the product-facing enum."""
    if status in ("in_stock", "low_stock"):
        return ProductStockStatus.INSTOCK.value
    if status == "out_of_stock" and allow_backorders:
        return ProductStockStatus.ONBACKORDER.value
    return ProductStockStatus.OUTOFSTOCK.value


def _status_for_quantity(quantity, allow_backorders):
    if quantity > 0:
        return ProductStockStatus.INSTOCK.value
    if allow_backorders:
        return ProductStockStatus.ONBACKORDER.value
    return ProductStockStatus.OUTOFSTOCK.value


def _validate_sku(code, field="sku"):
    if not code or len(code) < 3 or not _SKU_PATTERN.match(code):
        raise ValidationError({field: ["SKU must be 3-50 alphanumeric characters or hyphens"]})
    if code.startswith("-") or code.endswith("-") or "--" in code:
        raise ValidationError({field: ["SKU must not start or end with a hyphen or contain consecutive hyphens"]})


def _normalize_sizes(size_inventory):
    """Accept {"S": 10} or [{"size": "S", "quantity": 10}] and return [(size, quantity)]."""
    if not size_inventory:
        return []
    if isinstance(size_inventory, str):
        size_inventory = json.loads(size_inventory)
    if isinstance(size_inventory, dict):
        items = size_inventory.items()
    else:
        items = ((entry["size"], entry.get("quantity", 0)) for entry in size_inventory)

    sizes = []
    for size, quantity in items:
        size = str(size).strip()
        if not size:
            raise ValidationError({"size_inventory": ["Size names cannot be blank"]})
        if quantity is None or int(quantity) < 0:
            raise ValidationError({"size_inventory": [f"Quantity for size '{size}' cannot be negative"]})
        sizes.append((size, int(quantity)))
    return sizes


@catalogue.entity(part_of="Product")
class ProductVariation:
    """A purchasable variation of a product (e.g. a colour)."""

    sku: String(required=True, max_length=50)
    price: Float(required=True, min_value=0.0)
    sale_price: Float(min_value=0.0)
    attributes: Text()  # JSON object
    stock_quantity: Integer(default=0, min_value=0)
    stock_status: String(choices=ProductStockStatus, default=ProductStockStatus.OUTOFSTOCK.value)

    @invariant.post
    def sale_price_must_be_below_price(self):
        if self.sale_price is not None and self.sale_price >= self.price:
            raise ValidationError({"sale_price": ["Sale price must be less than regular price"]})


@catalogue.entity(part_of="Product")
class SizeStock:
    """Quantity on hand for one size of a product."""

    size: String(required=True, max_length=20)
    quantity: Integer(default=0, min_value=0)


@catalogue.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=200)
    sku: String(required=True, max_length=50)
    description: Text()
    product_type: String(choices=ProductType, default=ProductType.SIMPLE.value)
    status: String(choices=ProductStatus, default=ProductStatus.DRAFT.value)
    manage_stock: Boolean(default=True)
    allow_backorders: Boolean(default=False)
    warehouse_id: String(max_length=50, default="main")
    reorder_point: Integer(default=10, min_value=0)
    variations: HasMany(ProductVariation)
    size_inventory: HasMany(SizeStock)
    stock_quantity: Integer(default=0, min_value=0)
    stock_status: String(choices=ProductStockStatus, default=ProductStockStatus.OUTOFSTOCK.value)
    in_stock: Boolean(default=False)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def sizes_must_be_unique(self):
        sizes = [s.size for s in self.size_inventory]
        if len(sizes) != len(set(sizes)):
            raise ValidationError({"size_inventory": ["Each size can only appear once"]})

    @invariant.post
    def slug_must_be_url_safe(self):
        if self.slug and not _SLUG_PATTERN.match(self.slug):
            raise ValidationError(
                {"slug": ["Slug must contain only lowercase alphanumeric characters and single hyphens"]}
            )

    @property
    def available_sizes(self):
        return [s.size for s in self.size_inventory]

    @classmethod
    def create(
        cls,
        name,
        slug,
        sku,
        description=None,
        product_type=None,
        status=None,
        manage_stock=True,
        allow_backorders=False,
        warehouse_id=None,
        reorder_point=10,
        stock_quantity=0,
        size_inventory=None,
    ):
        from catalogue.product.events import ProductCreated

        _validate_sku(sku)
        now = datetime.now()
        product = cls(
            name=name,
            slug=slug,
            sku=sku,
            description=description,
            product_type=product_type or ProductType.SIMPLE.value,
            status=status or ProductStatus.DRAFT.value,
            manage_stock=manage_stock,
            allow_backorders=allow_backorders,
            warehouse_id=warehouse_id or "main",
            reorder_point=reorder_point,
            stock_quantity=stock_quantity or 0,
            created_at=now,
            updated_at=now,
        )
        for size, quantity in _normalize_sizes(size_inventory):
            product.add_size_inventory(SizeStock(size=size, quantity=quantity))
        product._refresh_stock_fields()

        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                slug=slug,
                sku=sku,
                product_type=product.product_type,
                status=product.status,
                created_at=now,
            )
        )
        product._announce_stock(["stock_quantity", "size_inventory", "manage_stock", "allow_backorders"])
        return product

    # -------------------------------------------------------------------
    # Stock helpers
    # -------------------------------------------------------------------
    def stock_lines(self, written=None):
        """Stock as the inventory context keys it: one line per size, per variation, or for the product.

        `written` holds the (variation_id, size) keys whose quantity this change
        sets; None means every line. Other lines go out with "set": false.
        """
        if self.size_inventory:
            keys = [(None, s.size, s.quantity) for s in self.size_inventory]
        elif self.variations:
            keys = [(str(v.id), None, v.stock_quantity) for v in self.variations]
        else:
            keys = [(None, None, self.stock_quantity)]
        return [
            {
                "variation_id": variation_id,
                "size": size,
                "quantity": quantity,
                "set": written is None or (variation_id, size) in written,
            }
            for variation_id, size, quantity in keys
        ]

    def _refresh_stock_fields(self, recount=True):
        """Recompute the product-level quantity, status and in_stock flag from merchant-owned stock."""
        if recount and self.size_inventory:
            self.stock_quantity = sum(s.quantity for s in self.size_inventory)
        elif recount and self.variations:
            self.stock_quantity = sum(v.stock_quantity for v in self.variations)
        self.stock_status = _status_for_quantity(self.stock_quantity, self.allow_backorders)
        self._refresh_stock_flags()

    def _refresh_stock_flags(self):
        if not self.manage_stock:
            self.stock_status = ProductStockStatus.INSTOCK.value
            self.in_stock = True
            return
        self.in_stock = self.stock_status == ProductStockStatus.INSTOCK.value and (
            self.stock_quantity > 0 or bool(self.allow_backorders)
        )

    def _announce_stock(self, changed_fields, written=None):
        from catalogue.product.events import ProductStockUpdated

        self.raise_(
            ProductStockUpdated(
                product_id=self.id,
                manage_stock=self.manage_stock,
                allow_backorders=self.allow_backorders,
                warehouse_id=self.warehouse_id,
                reorder_point=self.reorder_point,
                stock_lines=json.dumps(self.stock_lines(written)),
                changed_fields=json.dumps(changed_fields),
                updated_at=self.updated_at,
            )
        )

    # -------------------------------------------------------------------
    # Merchant updates
    # -------------------------------------------------------------------
    def update_details(self, name=None, slug=None, description=None, status=None):
        from catalogue.product.events import ProductDetailsUpdated

        if name is not None:
            self.name = name
        if slug is not None:
            self.slug = slug
        if description is not None:
            self.description = description
        if status is not None:
            self.status = status
        self.updated_at = datetime.now()

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                slug=self.slug,
                description=self.description,
                status=self.status,
                updated_at=self.updated_at,
            )
        )

    def update_stock(
        self,
        stock_quantity=None,
        size_inventory=None,
        allow_backorders=None,
        manage_stock=None,
        warehouse_id=None,
        reorder_point=None,
    ):
        """Change merchant-owned stock fields. Returns the names of the fields that changed.

        Only the quantities written here are pushed to the ledger as absolute
        stock; a flag or settings change leaves the ledger's stock alone.
        """
        changed = []
        written = set()

        if manage_stock is not None and manage_stock != self.manage_stock:
            self.manage_stock = manage_stock
            changed.append("manage_stock")
        if allow_backorders is not None and allow_backorders != self.allow_backorders:
            self.allow_backorders = allow_backorders
            changed.append("allow_backorders")
        if warehouse_id is not None and warehouse_id != self.warehouse_id:
            self.warehouse_id = warehouse_id
            changed.append("warehouse_id")
        if reorder_point is not None and reorder_point != self.reorder_point:
            self.reorder_point = reorder_point
            changed.append("reorder_point")
        if size_inventory is not None:
            sizes_changed, written_sizes = self._replace_sizes(_normalize_sizes(size_inventory))
            if sizes_changed:
                changed.append("size_inventory")
                written.update((None, size) for size in written_sizes)
        if stock_quantity is not None and not self.size_inventory and not self.variations:
            if stock_quantity < 0:
                raise ValidationError({"stock_quantity": ["Stock quantity cannot be negative"]})
            if stock_quantity != self.stock_quantity:
                self.stock_quantity = stock_quantity
                changed.append("stock_quantity")
                written.add((None, None))

        if not changed:
            return changed

        self._refresh_stock_fields(recount="size_inventory" in changed or "stock_quantity" in changed)
        self.updated_at = datetime.now()
        self._announce_stock(changed, written)
        return changed

    def _replace_sizes(self, sizes):
        """Returns (changed, sizes whose quantity was added or changed)."""
        current = {s.size: s for s in self.size_inventory}
        wanted = dict(sizes)
        if {size: s.quantity for size, s in current.items()} == wanted:
            return False, set()

        written = {
            size for size, quantity in wanted.items() if size not in current or current[size].quantity != quantity
        }

        with atomic_change(self):
            for size, entry in current.items():
                if size not in wanted:
                    self.remove_size_inventory(entry)
                elif entry.quantity != wanted[size]:
                    entry.quantity = wanted[size]
            for size, quantity in sizes:
                if size not in current:
                    self.add_size_inventory(SizeStock(size=size, quantity=quantity))
        return True, written

    def add_variation(self, sku, price, sale_price=None, attributes=None, stock_quantity=0):
        from catalogue.product.events import VariationAdded

        _validate_sku(sku)
        if any(v.sku == sku for v in self.variations):
            raise ValidationError({"sku": [f"Variation SKU '{sku}' already exists on this product"]})

        attrs_json = json.dumps(attributes) if attributes and isinstance(attributes, dict) else attributes
        variation = ProductVariation(
            sku=sku,
            price=price,
            sale_price=sale_price,
            attributes=attrs_json,
            stock_quantity=stock_quantity or 0,
            stock_status=_status_for_quantity(stock_quantity or 0, self.allow_backorders),
        )
        self.add_variations(variation)
        if self.product_type == ProductType.SIMPLE.value:
            self.product_type = ProductType.VARIABLE.value
        self._refresh_stock_fields()
        self.updated_at = datetime.now()

        self.raise_(
            VariationAdded(
                product_id=self.id,
                variation_id=variation.id,
                sku=sku,
                price=price,
                sale_price=sale_price,
                stock_quantity=variation.stock_quantity,
                created_at=self.updated_at,
            )
        )
        self._announce_stock(["variations"], {(str(variation.id), None)})
        return variation

    def update_variation_stock(self, variation_id, stock_quantity):
        variation = self._variation(variation_id)
        if stock_quantity is None or stock_quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock quantity cannot be negative"]})
        if stock_quantity == variation.stock_quantity:
            return False

        variation.stock_quantity = stock_quantity
        variation.stock_status = _status_for_quantity(stock_quantity, self.allow_backorders)
        self._refresh_stock_fields()
        self.updated_at = datetime.now()
        self._announce_stock(["variation_stock"], {(str(variation.id), None)})
        return True

    def _variation(self, variation_id):
        variation = next((v for v in self.variations if str(v.id) == str(variation_id)), None)
        if variation is None:
            raise ValidationError({"variation_id": [f"Variation {variation_id} not found"]})
        return variation

    # -------------------------------------------------------------------
    # Ledger refresh
    # -------------------------------------------------------------------
    def apply_inventory_level(
        self, stock_quantity, status, variation_id=None, size=None, warehouse_id=None, warehouse_stock=None
    ):
        """Refresh the denormalized stock cache from the ledger. Returns True if anything changed.

        A level for one size held in this product's warehouse also sets that
        size's quantity to the ledger's. Nothing here is announced back to the
        inventory context.
        """
        from catalogue.product.events import ProductStockSynced

        stock_status = to_product_stock_status(status, self.allow_backorders)
        before = (self.stock_quantity, self.stock_status, self.in_stock)

        if variation_id:
            variation = self._variation(variation_id)
            variation_changed = (variation.stock_quantity, variation.stock_status) != (stock_quantity, stock_status)
            variation.stock_quantity = stock_quantity
            variation.stock_status = stock_status
            if not self.size_inventory:
                self.stock_quantity = sum(v.stock_quantity for v in self.variations)
                self.stock_status = _status_for_quantity(self.stock_quantity, self.allow_backorders)
        else:
            variation_changed = False
            self.stock_quantity = stock_quantity
            self.stock_status = stock_status
        self._refresh_stock_flags()

        size_changed = self._apply_size_level(size, warehouse_id, warehouse_stock)

        after = (self.stock_quantity, self.stock_status, self.in_stock)
        if not variation_changed and not size_changed and before == after:
            return False

        self.updated_at = datetime.now()
        self.raise_(
            ProductStockSynced(
                product_id=self.id,
                variation_id=variation_id,
                stock_quantity=stock_quantity,
                stock_status=stock_status,
                in_stock=self.in_stock,
                synced_at=self.updated_at,
                size=size,
            )
        )
        return True

    def _apply_size_level(self, size, warehouse_id, warehouse_stock):
        if not size or warehouse_stock is None:
            return False
        if warehouse_id is not None and str(warehouse_id) != str(self.warehouse_id):
            return False

        entry = next((s for s in self.size_inventory if s.size == size), None)
        quantity = max(warehouse_stock, 0)
        if entry is None or entry.quantity == quantity:
            return False
        entry.quantity = quantity
        return True
