from datetime import date, datetime
from typing import List

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlmodel import Session

from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.errors import InvalidDateRange
from storefront.models.user import User
from storefront.schemas.analytics_schemas import (
    DailyVisitorData,
    DashboardStats,
    OrderOverview,
    SalesReport,
    VisitCreate,
)
from storefront.services import analytics_service


router = APIRouter()


@router.post("/visits", status_code=status.HTTP_201_CREATED)
def record_visit(payload: VisitCreate, session: Session = Depends(get_session)):
    analytics_service.record_visit(session, payload.visitor_key, payload.path)
    return {"message": "Visit recorded"}


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return analytics_service.get_dashboard_stats(session)


@router.get("/visitors", response_model=List[DailyVisitorData])
def visitor_chart(
    days: int = Query(30, ge=1, le=365),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return analytics_service.get_daily_visitor_chart(session, days)


@router.get("/orders", response_model=List[OrderOverview])
def order_overview(
    limit: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return analytics_service.get_order_overview(session, limit)


@router.get("/sales", response_model=SalesReport)
def sales_report(
    start_date: date,
    end_date: date,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    if start_date > end_date:
        raise InvalidDateRange(start_date, end_date)
    return analytics_service.get_sales_report(session, start_date, end_date)


@router.get("/export")
def export_excel(
    days: int = Query(30, ge=1, le=365),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    buffer = analytics_service.build_export_workbook(session, days)
    filename = f"analytics_{datetime.utcnow().date()}.xlsx"

    return StreamingResponse(
        buffer,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
