# app/api/v1/routes_mobile_import.py
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BusinessError, ValidationError
from app.db.base import get_db
from app.domain.mobile_import.report import ImportReportData, format_import_report
from app.domain.mobile_import.schemas import ImportReportRecordOut, ImportRequest, PendingOrdersOut
from app.domain.mobile_import.service import (
    MobileImportController,
    get_import_report,
    list_import_reports,
)
from app.domain.order_items.schemas import OrderOut


router = APIRouter(prefix="/api/v1/mobile-import", tags=["mobile-import"])


async def _controller_with_selection(db: AsyncSession, payload: ImportRequest) -> MobileImportController:
    controller = MobileImportController(db)
    await controller.load_pending()
    pending = controller.selection.pending_order_ids
    for order_id in payload.order_ids:
        if str(order_id) in pending and str(order_id) not in controller.selected_orders:
            controller.toggle_order(order_id)
    for sales_rep_id in payload.sales_rep_ids:
        if not controller.is_sales_rep_selected(sales_rep_id):
            controller.toggle_sales_rep(sales_rep_id)
    if not controller.selected_orders:
        raise ValidationError("No orders selected")
    return controller


@router.get("/pending", response_model=PendingOrdersOut)
async def pending_endpoint(db: AsyncSession = Depends(get_db)):
    controller = MobileImportController(db)
    orders, groups = await controller.load_pending()
    return PendingOrdersOut(
        orders=orders,
        groups=groups,
        total_value=sum((order.total for order in orders), 0),
    )

@router.post("/import", response_model=ImportReportData)
async def import_endpoint(
    payload: ImportRequest,
    db: AsyncSession = Depends(get_db),
):
    controller = await _controller_with_selection(db, payload)
    report = await controller.import_selected(payload.operator)
    if report is None:
        raise BusinessError("Another import is in progress")
    return report

@router.post("/reject", response_model=ImportReportData)
async def reject_endpoint(
    payload: ImportRequest,
    db: AsyncSession = Depends(get_db),
):
    controller = await _controller_with_selection(db, payload)
    report = await controller.reject_selected(payload.operator)
    if report is None:
        raise BusinessError("Another import is in progress")
    return report

@router.get("/history", response_model=List[OrderOut])
async def history_endpoint(db: AsyncSession = Depends(get_db)):
    return await MobileImportController(db).load_history()

@router.get("/reports", response_model=List[ImportReportRecordOut])
async def reports_endpoint(db: AsyncSession = Depends(get_db)):
    return await list_import_reports(db)

@router.get("/reports/{report_id}", response_model=ImportReportData)
async def report_endpoint(report_id: UUID, db: AsyncSession = Depends(get_db)):
    return await get_import_report(db, report_id)

@router.get("/reports/{report_id}/text", response_class=PlainTextResponse)
async def report_text_endpoint(report_id: UUID, db: AsyncSession = Depends(get_db)):
    return format_import_report(await get_import_report(db, report_id))
