"""FastAPI routes for checkout submission, quotes and order administration."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from commerce import settings
from commerce.api.schemas import (
    BulkStatusRequest,
    BulkStatusResponse,
    CancelOrderRequest,
    OrderListResponse,
    OrderResponse,
    PaymentStatusRequest,
    PlaceOrderRequest,
    QuoteRequest,
    QuoteResponse,
    UpdateStatusRequest,
)
from commerce.checkout.assembly import OrderLine, price_lines
from commerce.checkout.submission import OrderSubmitter
from commerce.order.cancellation import CancelOrder
from commerce.order.order import Order
from commerce.order.payment import UpdatePaymentStatus
from commerce.order.queries import find_by_number, list_orders, orders_for_customer
from commerce.order.status import BulkUpdateOrderStatus, UpdateOrderStatus

order_router = APIRouter(prefix="/orders", tags=["orders"])


def _load(order_id: str) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse.from_order(order)


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest) -> OrderResponse:
    """Validate, price and place an order; backend failures answer 502 with a generic message."""
    lines = [OrderLine(**item.model_dump()) for item in body.items]
    order_id = OrderSubmitter().checkout_lines(
        lines,
        body.customer.model_dump(),
        payment_method=body.payment_method,
        notes=body.notes,
    )
    return _load(order_id)


@order_router.post("/quote", response_model=QuoteResponse)
async def quote(body: QuoteRequest) -> QuoteResponse:
    """Price line items with the current delivery settings without placing an order."""
    tier = settings.delivery_tier()
    lines = [OrderLine(**item.model_dump()) for item in body.items]
    result = price_lines(lines, tier)
    return QuoteResponse(
        subtotal=result.subtotal,
        delivery_charge=result.delivery_charge,
        total=result.total,
        free_delivery_threshold=tier.free_delivery_threshold,
    )


@order_router.get("", response_model=OrderListResponse)
async def list_all_orders(status: str | None = None) -> OrderListResponse:
    return OrderListResponse(orders=[OrderResponse.from_order(order) for order in list_orders(status)])


@order_router.get("/number/{order_number}", response_model=OrderResponse)
async def get_order_by_number(order_number: str) -> OrderResponse:
    return OrderResponse.from_order(find_by_number(order_number))


@order_router.get("/customer/{phone}", response_model=OrderListResponse)
async def list_customer_orders(phone: str) -> OrderListResponse:
    return OrderListResponse(orders=[OrderResponse.from_order(order) for order in orders_for_customer(phone)])


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _load(order_id)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateStatusRequest) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        tracking_number=body.tracking_number,
    )
    current_domain.process(command, asynchronous=False)
    return _load(order_id)


@order_router.post("/bulk-status", response_model=BulkStatusResponse)
async def bulk_update_order_status(body: BulkStatusRequest) -> BulkStatusResponse:
    command = BulkUpdateOrderStatus(
        order_ids=json.dumps(body.order_ids),
        status=body.status,
        tracking_number=body.tracking_number,
    )
    updated = current_domain.process(command, asynchronous=False)
    return BulkStatusResponse(order_ids=updated, status=body.status)


@order_router.put("/{order_id}/payment-status", response_model=OrderResponse)
async def update_payment_status(order_id: str, body: PaymentStatusRequest) -> OrderResponse:
    command = UpdatePaymentStatus(order_id=order_id, payment_status=body.payment_status)
    current_domain.process(command, asynchronous=False)
    return _load(order_id)


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> OrderResponse:
    command = CancelOrder(order_id=order_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return _load(order_id)
