# app/domain/mobile_import/service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple
from uuid import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import NotFoundError, PersistenceError
from app.core.guard import OperationGuard
from app.db.models.import_reports import ImportReport
from app.db.models.orders import Order
from app.db.repositories.import_reports import get_import_report_by_id, get_import_reports
from app.db.repositories.orders import (
    IMPORTED,
    REJECTED,
    get_import_history,
    get_pending_mobile_orders,
    set_import_status,
)
from app.domain.order_items.schemas import OrderOut
from .grouping import ImportSelection, MobileOrderGroup, group_orders_by_sales_rep
from .report import IMPORT, REJECT, ImportReportData, generate_import_report

logger = logging.getLogger(__name__)

# import and reject share one in-flight slot
mobile_import_guard = OperationGuard("mobile-import")
GUARD_KEY = "mobile-import"


async def import_orders(
    db: AsyncSession,
    order_ids: Sequence[UUID],
    imported_by: str
) -> int:
    return await _change_import_status(db, order_ids, IMPORTED, imported_by)

async def reject_orders(
    db: AsyncSession,
    order_ids: Sequence[UUID],
    rejected_by: str
) -> int:
    return await _change_import_status(db, order_ids, REJECTED, rejected_by)

async def _change_import_status(
    db: AsyncSession,
    order_ids: Sequence[UUID],
    status: str,
    operator: str,
) -> int:
    logger.info("Marking %d mobile order(s) as %s", len(order_ids), status)
    try:
        changed = await set_import_status(db, order_ids, status, operator, datetime.now(timezone.utc))
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Error marking mobile orders as %s", status)
        raise PersistenceError(f"Could not mark orders as {status}") from exc

    if changed != len(order_ids):
        logger.warning("%d of %d order(s) were no longer pending", len(order_ids) - changed, len(order_ids))
    return changed

async def save_import_report(db: AsyncSession, report: ImportReportData) -> ImportReport:
    record = ImportReport(
        id=UUID(report.id),
        timestamp=report.timestamp,
        operation_type=report.operation_type,
        operator=report.operator,
        orders_count=report.summary.total_orders,
        total_value=report.summary.total_value,
        sales_reps_count=report.summary.sales_reps_count,
        report_data=report.model_dump(mode="json"),
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record

async def list_import_reports(db: AsyncSession, limit: int = 50) -> List[ImportReport]:
    return await get_import_reports(db, limit)

async def get_import_report(db: AsyncSession, report_id: UUID) -> ImportReportData:
    record = await get_import_report_by_id(db, report_id)
    if record is None:
        raise NotFoundError("Import report not found")
    return ImportReportData.model_validate(record.report_data)


class MobileImportController:
    """Pending mobile orders, the operator's selection and the bulk actions on it."""

    def __init__(
        self,
        db: AsyncSession,
        guard: OperationGuard = mobile_import_guard,
        history_limit: Optional[int] = None,
    ):
        self.db = db
        self._guard = guard
        self.history_limit = history_limit or settings.IMPORT_HISTORY_LIMIT
        self.selection = ImportSelection()
        self.pending: List[Order] = []
        self.groups: List[MobileOrderGroup] = []
        self.history: List[Order] = []
        self.last_report: Optional[ImportReportData] = None

    async def load_pending(self) -> Tuple[List[Order], List[MobileOrderGroup]]:
        self.pending = await get_pending_mobile_orders(self.db)
        self.groups = group_orders_by_sales_rep(self.pending)
        self.selection.set_groups(self.groups)
        logger.info("Loaded %d pending mobile orders in %d group(s)", len(self.pending), len(self.groups))
        return self.pending, self.groups

    async def load_history(self) -> List[Order]:
        self.history = await get_import_history(self.db, self.history_limit)
        return self.history

    async def refresh(self) -> None:
        await self.load_pending()
        await self.load_history()

    @property
    def selected_orders(self):
        return self.selection.selected_orders

    @property
    def selected_sales_reps(self):
        return self.selection.selected_sales_reps

    def is_sales_rep_selected(self, sales_rep_id: str) -> bool:
        return self.selection.is_sales_rep_selected(sales_rep_id)

    def toggle_order(self, order_id) -> None:
        self.selection.toggle_order(str(order_id))

    def toggle_sales_rep(self, sales_rep_id) -> None:
        self.selection.toggle_sales_rep(str(sales_rep_id))

    def select_all(self) -> None:
        self.selection.select_all()

    def clear(self) -> None:
        self.selection.clear()

    async def import_selected(self, operator: str = "admin") -> Optional[ImportReportData]:
        return await self._process(IMPORT, operator)

    async def reject_selected(self, operator: str = "admin") -> Optional[ImportReportData]:
        return await self._process(REJECT, operator)

    async def _process(self, operation_type: str, operator: str) -> Optional[ImportReportData]:
        selected = self.selection.selected_orders
        if not selected:
            logger.info("Nothing selected to %s", operation_type)
            return None

        with self._guard.hold(GUARD_KEY) as acquired:
            if not acquired:
                return None

            # plain copies taken before the status change; the report must
            # describe what was selected, not what the reload returns
            snapshot = [OrderOut.model_validate(order) for order in self.pending if str(order.id) in selected]
            order_ids = [order.id for order in snapshot]
            if not order_ids:
                logger.info("Selected orders are no longer pending, nothing to %s", operation_type)
                return None

            if operation_type == IMPORT:
                await import_orders(self.db, order_ids, operator)
            else:
                await reject_orders(self.db, order_ids, operator)

            report = generate_import_report(
                snapshot,
                operation_type,
                operator,
                top_products=settings.IMPORT_REPORT_TOP_PRODUCTS,
            )
            try:
                await save_import_report(self.db, report)
            except SQLAlchemyError:
                await self.db.rollback()
                logger.exception("Orders were marked as %s but report %s was not saved", operation_type, report.id)

            self.selection.clear()
            self.last_report = report
            await self.refresh()
            return report
