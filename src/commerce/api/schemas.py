"""Pydantic request/response schemas for the order API.

These are external contracts, kept separate from the Protean commands.
Customer fields are accepted as loose strings so that the domain can report
every field problem at once, in form order.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CustomerInfoSchema(BaseModel):
    name: str = ""
    phone: str = ""
    email: str | None = None
    address: str = ""
    city: str = ""
    pincode: str = ""


class OrderLineSchema(BaseModel):
    product_id: str
    product_name: str
    variant_id: str
    variant_size: str = ""
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    customer: CustomerInfoSchema
    items: list[OrderLineSchema]
    payment_method: str | None = None
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer": {
                        "name": "Asha Rao",
                        "phone": "+91 98765 43210",
                        "email": "asha@example.com",
                        "address": "12 MG Road",
                        "city": "Bengaluru",
                        "pincode": "560001",
                    },
                    "items": [
                        {
                            "product_id": "prod-ghee",
                            "product_name": "Desi Ghee",
                            "variant_id": "var-500ml",
                            "variant_size": "500ml",
                            "price": 450.0,
                            "quantity": 2,
                        }
                    ],
                    "payment_method": "cod",
                }
            ]
        }
    }


class QuoteRequest(BaseModel):
    items: list[OrderLineSchema]


class UpdateStatusRequest(BaseModel):
    status: str
    tracking_number: str | None = None


class BulkStatusRequest(BaseModel):
    order_ids: list[str] = Field(min_length=1)
    status: str
    tracking_number: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_ids": ["ord-001", "ord-002"],
                    "status": "shipped",
                    "tracking_number": "BLUEDART-7781",
                }
            ]
        }
    }


class PaymentStatusRequest(BaseModel):
    payment_status: str


class CancelOrderRequest(BaseModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class QuoteResponse(BaseModel):
    subtotal: float
    delivery_charge: float
    total: float
    free_delivery_threshold: float


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    variant_id: str
    variant_size: str | None = None
    price: float
    quantity: int
    total: float


class OrderResponse(BaseModel):
    order_id: str
    order_number: str | None = None
    customer: CustomerInfoSchema
    items: list[OrderItemResponse]
    subtotal: float
    delivery_charge: float
    total: float
    status: str
    payment_status: str
    payment_method: str
    order_date: datetime | None = None
    estimated_delivery: datetime | None = None
    actual_delivery: datetime | None = None
    shipped_at: datetime | None = None
    tracking_number: str | None = None
    notes: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        customer = order.customer
        return cls(
            order_id=str(order.id),
            order_number=order.order_number,
            customer=CustomerInfoSchema(
                name=customer.name,
                phone=customer.phone,
                email=customer.email,
                address=customer.address,
                city=customer.city,
                pincode=customer.pincode,
            ),
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    variant_id=str(item.variant_id),
                    variant_size=item.variant_size,
                    price=item.price,
                    quantity=item.quantity,
                    total=item.total,
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            delivery_charge=order.delivery_charge,
            total=order.total,
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            order_date=order.order_date,
            estimated_delivery=order.estimated_delivery,
            actual_delivery=order.actual_delivery,
            shipped_at=order.shipped_at,
            tracking_number=order.tracking_number,
            notes=order.notes,
            cancellation_reason=order.cancellation_reason,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class BulkStatusResponse(BaseModel):
    order_ids: list[str]
    status: str
