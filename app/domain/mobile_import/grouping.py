# app/domain/mobile_import/grouping.py
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Set

logger = logging.getLogger(__name__)

UNASSIGNED_KEY = ""
UNASSIGNED_NAME = "Unassigned"


@dataclass
class MobileOrderGroup:
    sales_rep_id: str
    sales_rep_name: str
    orders: list = field(default_factory=list)
    total_value: object = 0

    @property
    def count(self) -> int:
        return len(self.orders)

    @property
    def order_ids(self) -> List[str]:
        return [str(order.id) for order in self.orders]


def sales_rep_key(order) -> str:
    return str(order.sales_rep_id) if order.sales_rep_id else UNASSIGNED_KEY


def group_orders_by_sales_rep(orders: Iterable) -> List[MobileOrderGroup]:
    """Partitions pending orders by sales rep, keeping first-seen order.

    Orders without a sales rep end up in one group keyed by an empty string.
    """
    groups: Dict[str, MobileOrderGroup] = {}
    for order in orders:
        key = sales_rep_key(order)
        group = groups.get(key)
        if group is None:
            name = (order.sales_rep_name or "") if key else UNASSIGNED_NAME
            group = groups[key] = MobileOrderGroup(sales_rep_id=key, sales_rep_name=name)
        group.orders.append(order)
        group.total_value = group.total_value + (order.total or 0)

    unassigned = groups.get(UNASSIGNED_KEY)
    if unassigned is not None:
        logger.warning(
            "%d pending mobile order(s) have no sales rep: %s",
            unassigned.count, ", ".join(unassigned.order_ids),
        )
    return list(groups.values())


class ImportSelection:
    """Selected pending orders.

    Only order ids are stored. A sales rep counts as selected when every
    pending order of its group is selected, so the two views cannot drift.
    """

    def __init__(self, groups: Iterable[MobileOrderGroup] = ()):
        self._orders: Set[str] = set()
        self._groups: Dict[str, MobileOrderGroup] = {}
        self.set_groups(groups)

    def set_groups(self, groups: Iterable[MobileOrderGroup]) -> None:
        self._groups = {group.sales_rep_id: group for group in groups}
        pending = self.pending_order_ids
        self._orders &= pending

    @property
    def pending_order_ids(self) -> Set[str]:
        return {order_id for group in self._groups.values() for order_id in group.order_ids}

    @property
    def selected_orders(self) -> FrozenSet[str]:
        return frozenset(self._orders)

    @property
    def selected_sales_reps(self) -> FrozenSet[str]:
        return frozenset(key for key in self._groups if self.is_sales_rep_selected(key))

    def is_sales_rep_selected(self, sales_rep_id: str) -> bool:
        group = self._groups.get(sales_rep_id)
        if group is None or not group.orders:
            return False
        return all(order_id in self._orders for order_id in group.order_ids)

    def toggle_order(self, order_id: str) -> None:
        order_id = str(order_id)
        if order_id in self._orders:
            self._orders.discard(order_id)
        else:
            self._orders.add(order_id)

    def toggle_sales_rep(self, sales_rep_id: str) -> None:
        group = self._groups.get(str(sales_rep_id))
        if group is None:
            logger.info("No pending orders for sales rep %s", sales_rep_id)
            return
        if self.is_sales_rep_selected(group.sales_rep_id):
            self._orders.difference_update(group.order_ids)
        else:
            self._orders.update(group.order_ids)

    def select_all(self) -> None:
        self._orders = self.pending_order_ids

    def clear(self) -> None:
        self._orders = set()
