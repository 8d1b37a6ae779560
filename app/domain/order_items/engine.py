# app/domain/order_items/engine.py
"""In-memory order draft that merges lines by (product, unit).

The draft is updated first and, when it is bound to a persisted order, the
change is written through an :class:`ItemStore` afterwards as one unit of
work: the store stages every step and commits once. A failed write rolls the
store back, puts the draft back the way it was before the call and re-raises.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Protocol
from uuid import uuid4

from app.core.errors import NotFoundError, PersistenceError, ValidationError
from app.core.guard import OperationGuard

logger = logging.getLogger(__name__)

DEFAULT_UNIT = "UN"


@dataclass(frozen=True)
class ProductRef:
    id: str
    name: str
    code: Optional[int] = None
    unit: Optional[str] = None

    @classmethod
    def from_model(cls, product) -> "ProductRef":
        return cls(id=str(product.id), name=product.name, code=product.code, unit=product.unit)


@dataclass(frozen=True)
class DraftItem:
    id: str
    product_id: str
    product_name: str
    product_code: Optional[int]
    quantity: Any
    unit_price: Any
    price: Any
    discount: Any
    total: Any
    unit: str

    @classmethod
    def from_model(cls, item) -> "DraftItem":
        return cls(
            id=str(item.id),
            product_id=str(item.product_id) if item.product_id is not None else "",
            product_name=item.product_name,
            product_code=item.product_code,
            quantity=item.quantity,
            unit_price=item.unit_price,
            price=item.price,
            discount=item.discount,
            total=item.total,
            unit=item.unit,
        )


class ItemStore(Protocol):
    async def save_item(self, order_id: str, item: DraftItem) -> str: ...

    async def delete_items_by_product_code(self, order_id: str, product_code: int) -> None: ...

    async def delete_item(self, order_id: str, item_id: str) -> None: ...

    async def update_order_total(self, order_id: str) -> Any: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class OrderDraft:
    def __init__(
        self,
        items: Optional[List[DraftItem]] = None,
        *,
        order_id: Optional[str] = None,
        store: Optional[ItemStore] = None,
        guard: Optional[OperationGuard] = None,
        default_unit: str = DEFAULT_UNIT,
    ):
        self._items: List[DraftItem] = list(items or [])
        self.order_id = order_id
        self._store = store
        self._guard = guard or OperationGuard("order-draft")
        self._key = order_id or f"draft-{uuid4().hex}"
        self.default_unit = default_unit

    @property
    def edit_mode(self) -> bool:
        return self.order_id is not None and self._store is not None

    @property
    def items(self) -> List[DraftItem]:
        return list(self._items)

    @property
    def subtotal(self):
        return sum((item.total for item in self._items), 0)

    def _find(self, product_id: str, unit: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.product_id == product_id and item.unit == unit:
                return index
        return None

    def _index_of(self, item_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    async def _write_item(self, item: DraftItem) -> str:
        try:
            saved_id = await self._store.save_item(self.order_id, item)
            await self._store.update_order_total(self.order_id)
            await self._store.commit()
        except PersistenceError:
            await self._store.rollback()
            raise
        return saved_id

    async def add_item(
        self,
        product: ProductRef,
        quantity,
        price,
        unit: Optional[str] = None,
        operation_id: Optional[str] = None,
    ) -> Optional[DraftItem]:
        """Adds ``quantity`` of ``product`` at ``price``.

        Returns the resulting line, or None when the call was dropped because
        another mutation of this draft is in flight (or ``operation_id``
        repeats the previous call).
        """
        if product is None or not str(product.id or "").strip() or quantity <= 0 or price < 0:
            raise ValidationError("Invalid item data")

        with self._guard.hold(self._key, operation_id) as acquired:
            if not acquired:
                return None

            product_id = str(product.id)
            resolved_unit = unit or product.unit or self.default_unit
            index = self._find(product_id, resolved_unit)

            if index is not None:
                return await self._merge(index, quantity, price)
            return await self._append(product, quantity, price, resolved_unit)

    async def _merge(self, index: int, quantity, price) -> DraftItem:
        previous = self._items[index]
        new_quantity = (previous.quantity or 0) + quantity
        merged = replace(
            previous,
            quantity=new_quantity,
            unit_price=price,
            price=price,
            total=price * new_quantity,
        )
        self._items[index] = merged
        logger.info(
            "Merged %s x %s (%s) into existing line, quantity now %s",
            quantity, previous.product_name, previous.unit, new_quantity,
        )

        if self.edit_mode:
            try:
                await self._write_item(merged)
            except PersistenceError:
                position = self._index_of(merged.id)
                if position is not None:
                    self._items[position] = previous
                logger.error("Could not save merged line %s of order %s, reverted", merged.id, self.order_id)
                raise
        return merged

    async def _append(self, product: ProductRef, quantity, price, unit: str) -> DraftItem:
        item = DraftItem(
            id=str(uuid4()),
            product_id=str(product.id),
            product_name=product.name,
            product_code=product.code,
            quantity=quantity,
            unit_price=price,
            price=price,
            discount=0,
            total=price * quantity,
            unit=unit,
        )
        self._items.append(item)
        logger.info("Added %s x %s (%s) as a new line", quantity, product.name, unit)

        if self.edit_mode:
            try:
                saved_id = await self._write_item(item)
            except PersistenceError:
                self._items = [i for i in self._items if i.id != item.id]
                logger.error("Could not save new line for %s on order %s, removed", product.name, self.order_id)
                raise
            if saved_id and saved_id != item.id:
                position = self._index_of(item.id)
                item = replace(item, id=saved_id)
                if position is not None:
                    self._items[position] = item
        return item

    async def remove_item(
        self,
        product_id: str,
        operation_id: Optional[str] = None,
    ) -> Optional[List[DraftItem]]:
        """Removes every line of ``product_id`` whatever its unit.

        Returns the removed lines, or None when the call was dropped.
        """
        if not product_id or not str(product_id).strip():
            raise ValidationError("Invalid product id for removal")

        with self._guard.hold(self._key, operation_id) as acquired:
            if not acquired:
                return None

            product_id = str(product_id)
            removed = [item for item in self._items if item.product_id == product_id]
            if not removed:
                raise NotFoundError("Item not found for removal")

            before = list(self._items)
            self._items = [item for item in self._items if item.product_id != product_id]
            logger.info("Removed %d line(s) of %s", len(removed), removed[0].product_name)

            if self.edit_mode:
                try:
                    await self._delete_remote(removed)
                except PersistenceError:
                    self._items = before
                    logger.error("Could not remove %s from order %s, restored", product_id, self.order_id)
                    raise
            return removed

    async def _delete_remote(self, removed: List[DraftItem]) -> None:
        codes = []
        try:
            for item in removed:
                if item.product_code is None:
                    await self._store.delete_item(self.order_id, item.id)
                elif item.product_code not in codes:
                    codes.append(item.product_code)
            for code in codes:
                await self._store.delete_items_by_product_code(self.order_id, code)
            await self._store.update_order_total(self.order_id)
            await self._store.commit()
        except PersistenceError:
            await self._store.rollback()
            raise
