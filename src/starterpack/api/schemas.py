"""Pydantic API schemas for the starter pack domain.

These are the external API contracts: separate from domain commands.
The API layer translates between these schemas and domain commands.
"""

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class DeliveryAddressRequest(BaseModel):
    address_line1: str
    address_line2: str | None = None
    city: str
    region: str
    contact_number: str


class PlaceOrderRequest(BaseModel):
    customer_id: str
    merchant_id: str | None = None
    includes_device: bool = False
    delivery_address: DeliveryAddressRequest


class AdvanceStageRequest(BaseModel):
    stage: str
    expected_revision: int | None = None


class RecordSettlementRequest(BaseModel):
    outcome: str
    settlement_reference: str | None = None
    expected_revision: int | None = None


class AttachProofRequest(BaseModel):
    proof_reference: str
    expected_revision: int | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class StatusResponse(BaseModel):
    status: str


class StageOptionResponse(BaseModel):
    stage: str
    label: str
    state: str
    selectable: bool


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    merchant_id: str | None = None
    includes_device: bool
    device_cost: float
    total_cost: float
    fulfillment_stage: str
    stage_label: str
    payment_status: str
    settlement_kind: str | None = None
    settlement_reference: str | None = None
    delivery_address: DeliveryAddressRequest
    created_at: str | None = None
    estimated_delivery: str | None = None
    delivered_at: str | None = None
    proof_of_delivery: str | None = None
    stage_timestamps: dict[str, str]
    is_delayed: bool
    delay_message: str | None = None
    stage_options: list[StageOptionResponse]
    revision: int


class OrderSummaryResponse(BaseModel):
    order_id: str
    customer_id: str
    merchant_id: str | None = None
    fulfillment_stage: str
    stage_label: str
    payment_status: str | None = None
    includes_device: bool
    total_cost: float
    estimated_delivery: str | None = None
    delivered_at: str | None = None
    placed_at: str | None = None
    settlement_reference: str | None = None
    delivery_city: str | None = None
    has_proof: bool = False


class OrderListResponse(BaseModel):
    orders: list[OrderSummaryResponse]
