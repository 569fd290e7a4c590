"""Admin dashboard figures and the spreadsheet export built from them.

Revenue only counts orders whose payment completed; order status is ignored
so that paid-but-unshipped orders still show up in the numbers.
"""

import io
import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List

from openpyxl import Workbook
from openpyxl.chart import BarChart, Reference
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from sqlalchemy import func
from sqlmodel import Session, select

from storefront.constants.order_status import OrderStatus, PaymentStatus, UserRole
from storefront.models.category import Category
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.product import Product
from storefront.models.site_visit import SiteVisit
from storefront.models.user import User
from storefront.schemas.analytics_schemas import (
    DailyVisitorData,
    DashboardStats,
    OrderOverview,
    SalesReport,
    TopProduct,
)
from storefront.services.coupon_service import ZERO, to_money

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 5


def _count(session: Session, query) -> int:
    return session.exec(query).one() or 0


def get_dashboard_stats(session: Session) -> DashboardStats:
    total_revenue = session.exec(
        select(func.sum(Order.final_amount)).where(Order.payment_status == PaymentStatus.completed)
    ).one()

    return DashboardStats(
        total_categories=_count(session, select(func.count(Category.id)).where(Category.is_active == True)),  # noqa: E712
        total_products=_count(session, select(func.count(Product.id)).where(Product.is_active == True)),  # noqa: E712
        total_customers=_count(session, select(func.count(User.id)).where(User.role == UserRole.customer)),
        total_orders=_count(session, select(func.count(Order.id))),
        total_revenue=to_money(total_revenue or ZERO),
        pending_orders=_count(session, select(func.count(Order.id)).where(Order.status == OrderStatus.pending)),
    )


def record_visit(session: Session, visitor_key: str, path: str = None) -> SiteVisit:
    visit = SiteVisit(visitor_key=visitor_key, path=path)
    session.add(visit)
    session.commit()
    session.refresh(visit)
    return visit


def get_daily_visitor_chart(session: Session, days: int = 30) -> List[DailyVisitorData]:
    """Unique visitors per day for the last ``days`` days, oldest first.

    Days without visits are reported as zero.
    """
    today = datetime.utcnow().date()
    first_day = today - timedelta(days=days - 1)

    rows = session.exec(
        select(func.date(SiteVisit.created_at), func.count(func.distinct(SiteVisit.visitor_key)))
        .where(SiteVisit.created_at >= datetime.combine(first_day, time.min))
        .group_by(func.date(SiteVisit.created_at))
    ).all()

    counts = {str(day): visitors for day, visitors in rows}

    return [
        DailyVisitorData(date=str(day), visitors=counts.get(str(day), 0))
        for day in (first_day + timedelta(days=offset) for offset in range(days))
    ]


def get_order_overview(session: Session, limit: int = 10) -> List[OrderOverview]:
    rows = session.exec(
        select(Order, User)
        .join(User, Order.user_id == User.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
    ).all()

    return [
        OrderOverview(
            id=order.id,
            user_name=user.full_name,
            total_amount=order.total_amount,
            final_amount=order.final_amount,
            status=order.status.value,
            payment_status=order.payment_status.value,
            created_at=order.created_at,
        )
        for order, user in rows
    ]


def get_sales_report(session: Session, start_date: date, end_date: date) -> SalesReport:
    """Paid orders created between ``start_date`` and ``end_date``, both days included."""
    start = datetime.combine(start_date, time.min)
    end = datetime.combine(end_date + timedelta(days=1), time.min)

    paid_in_range = (
        Order.payment_status == PaymentStatus.completed,
        Order.created_at >= start,
        Order.created_at < end,
    )

    total_sales, total_orders = session.exec(
        select(func.sum(Order.final_amount), func.count(Order.id)).where(*paid_in_range)
    ).one()

    total_sales = to_money(total_sales or ZERO)
    total_orders = total_orders or 0
    avg_order_value = to_money(total_sales / total_orders) if total_orders else ZERO

    quantity = func.sum(OrderItem.quantity)
    revenue = func.sum(OrderItem.price * OrderItem.quantity)

    rows = session.exec(
        select(Product.name, quantity, revenue)
        .join(OrderItem, OrderItem.product_id == Product.id)
        .join(Order, OrderItem.order_id == Order.id)
        .where(*paid_in_range)
        .group_by(Product.id, Product.name)
        .order_by(quantity.desc())
        .limit(TOP_PRODUCTS_LIMIT)
    ).all()

    top_products = [
        TopProduct(product_name=name, quantity=sold, revenue=to_money(Decimal(str(earned))))
        for name, sold, earned in rows
    ]

    return SalesReport(
        total_sales=total_sales,
        total_orders=total_orders,
        avg_order_value=avg_order_value,
        top_products=top_products,
    )


# ---------- EXPORT ----------


THIN = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill("solid", fgColor="4F81BD")
CENTER = Alignment(horizontal="center")
CURRENCY = "#,##0.00"


def _write_sheet(ws, header, rows, money_columns=()):
    ws.append(header)

    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = THIN
        cell.alignment = CENTER

    for row in rows:
        ws.append(list(row))

    for row in ws.iter_rows(min_row=2):
        for index in money_columns:
            row[index].number_format = CURRENCY
        for cell in row:
            cell.border = THIN
            cell.alignment = CENTER


def build_export_workbook(session: Session, days: int = 30) -> io.BytesIO:
    """Dashboard, visitors, recent orders and top products as an .xlsx file."""
    stats = get_dashboard_stats(session)
    visitors = get_daily_visitor_chart(session, days)
    orders = get_order_overview(session, limit=50)

    today = datetime.utcnow().date()
    report = get_sales_report(session, today - timedelta(days=days - 1), today)

    wb = Workbook()

    ws = wb.active
    ws.title = "Overview"
    _write_sheet(
        ws,
        ["Metric", "Value"],
        [
            ["Categories", stats.total_categories],
            ["Products", stats.total_products],
            ["Customers", stats.total_customers],
            ["Orders", stats.total_orders],
            ["Pending Orders", stats.pending_orders],
            ["Revenue", float(stats.total_revenue)],
        ],
    )
    ws["B7"].number_format = CURRENCY

    ws2 = wb.create_sheet("Visitors")
    _write_sheet(ws2, ["Date", "Visitors"], [[v.date, v.visitors] for v in visitors])

    chart = BarChart()
    chart.title = "Daily Visitors"
    data_ref = Reference(ws2, min_col=2, min_row=1, max_row=len(visitors) + 1)
    cats = Reference(ws2, min_col=1, min_row=2, max_row=len(visitors) + 1)
    chart.add_data(data_ref, titles_from_data=True)
    chart.set_categories(cats)
    ws2.add_chart(chart, "D3")

    ws3 = wb.create_sheet("Recent Orders")
    _write_sheet(
        ws3,
        ["Order", "Customer", "Total", "Final", "Status", "Payment", "Created"],
        [
            [
                o.id,
                o.user_name,
                float(o.total_amount),
                float(o.final_amount),
                o.status,
                o.payment_status,
                o.created_at.strftime("%Y-%m-%d %H:%M"),
            ]
            for o in orders
        ],
        money_columns=(2, 3),
    )

    ws4 = wb.create_sheet("Top Products")
    _write_sheet(
        ws4,
        ["Product", "Units Sold", "Revenue"],
        [[p.product_name, p.quantity, float(p.revenue)] for p in report.top_products],
        money_columns=(2,),
    )

    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)

    logger.info(f"Analytics export built: {len(orders)} orders, {len(visitors)} days")
    return buffer
