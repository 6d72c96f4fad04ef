"""FastAPI routes for the starter pack domain."""

import json
from datetime import UTC, datetime

from fastapi import APIRouter
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from starterpack.api.schemas import (
    AdvanceStageRequest,
    AttachProofRequest,
    DeliveryAddressRequest,
    OrderIdResponse,
    OrderListResponse,
    OrderResponse,
    OrderSummaryResponse,
    PlaceOrderRequest,
    RecordSettlementRequest,
    StageOptionResponse,
    StatusResponse,
)
from starterpack.order.errors import StaleRead
from starterpack.order.order import StarterPackOrder
from starterpack.order.placement import PlaceStarterPackOrder
from starterpack.order.progression import AdvanceFulfillmentStage
from starterpack.order.proof import AttachProofOfDelivery
from starterpack.order.repository import STALE_SAVE_MESSAGE
from starterpack.order.settlement import RecordSettlement
from starterpack.order.stages import stage_label, stage_options
from starterpack.projections.customer_order_history import orders_for_customer
from starterpack.projections.order_board import all_orders

router = APIRouter(prefix="/starter-pack-orders", tags=["starter-pack-orders"])


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _process(command):
    """Run a command synchronously. A version conflict left after retries is a StaleRead."""
    try:
        return current_domain.process(command, asynchronous=False)
    except ExpectedVersionError as exc:
        raise StaleRead({"revision": [STALE_SAVE_MESSAGE]}) from exc


def _order_response(order: StarterPackOrder, now: datetime) -> OrderResponse:
    address = order.delivery_address
    return OrderResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        merchant_id=str(order.merchant_id) if order.merchant_id else None,
        includes_device=bool(order.includes_device),
        device_cost=order.device_cost,
        total_cost=order.total_cost,
        fulfillment_stage=order.fulfillment_stage,
        stage_label=stage_label(order.fulfillment_stage),
        payment_status=order.payment_status,
        settlement_kind=order.settlement.kind if order.settlement else None,
        settlement_reference=order.settlement_reference,
        delivery_address=DeliveryAddressRequest(
            address_line1=address.address_line1,
            address_line2=address.address_line2,
            city=address.city,
            region=address.region,
            contact_number=address.contact_number,
        ),
        created_at=_iso(order.created_at),
        estimated_delivery=_iso(order.estimated_delivery),
        delivered_at=_iso(order.delivered_at),
        proof_of_delivery=order.proof_of_delivery,
        stage_timestamps=order.audit_trail,
        is_delayed=order.is_delayed(now),
        delay_message=order.delay_message(now),
        stage_options=[
            StageOptionResponse(
                stage=option.stage,
                label=option.label,
                state=option.state,
                selectable=option.selectable,
            )
            for option in stage_options(order.fulfillment_stage)
        ],
        revision=order.revision,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    """Place a starter pack order."""
    command = PlaceStarterPackOrder(
        customer_id=body.customer_id,
        merchant_id=body.merchant_id,
        includes_device=body.includes_device,
        delivery_address=json.dumps(body.delivery_address.model_dump()),
    )
    result = _process(command)
    return OrderIdResponse(order_id=result)


@router.put("/{order_id}/stage", response_model=StatusResponse)
async def advance_stage(order_id: str, body: AdvanceStageRequest) -> StatusResponse:
    """Move an order to its current or next fulfillment stage."""
    command = AdvanceFulfillmentStage(
        order_id=order_id,
        stage=body.stage,
        expected_revision=body.expected_revision,
    )
    _process(command)
    return StatusResponse(status="stage_updated")


@router.put("/{order_id}/settlement", response_model=StatusResponse)
async def record_settlement(order_id: str, body: RecordSettlementRequest) -> StatusResponse:
    """Record the payment gateway outcome for an order."""
    command = RecordSettlement(
        order_id=order_id,
        outcome=body.outcome,
        settlement_reference=body.settlement_reference,
        expected_revision=body.expected_revision,
    )
    _process(command)
    return StatusResponse(status="payment_settled")


@router.put("/{order_id}/proof", response_model=StatusResponse)
async def attach_proof(order_id: str, body: AttachProofRequest) -> StatusResponse:
    """Attach proof of delivery to a delivered order."""
    command = AttachProofOfDelivery(
        order_id=order_id,
        proof_reference=body.proof_reference,
        expected_revision=body.expected_revision,
    )
    _process(command)
    return StatusResponse(status="proof_attached")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@router.get("", response_model=OrderListResponse)
async def list_orders() -> OrderListResponse:
    """Every starter pack order, newest first (operator view)."""
    return OrderListResponse(
        orders=[
            OrderSummaryResponse(
                order_id=str(row.order_id),
                customer_id=str(row.customer_id),
                merchant_id=str(row.merchant_id) if row.merchant_id else None,
                fulfillment_stage=row.fulfillment_stage,
                stage_label=stage_label(row.fulfillment_stage),
                payment_status=row.payment_status,
                includes_device=bool(row.includes_device),
                total_cost=row.total_cost,
                estimated_delivery=_iso(row.estimated_delivery),
                delivered_at=_iso(row.delivered_at),
                placed_at=_iso(row.placed_at),
                settlement_reference=row.settlement_reference,
                delivery_city=row.delivery_city,
                has_proof=bool(row.has_proof),
            )
            for row in all_orders()
        ]
    )


@router.get("/customers/{customer_id}", response_model=OrderListResponse)
async def customer_orders(customer_id: str) -> OrderListResponse:
    """A customer's order history. Orders without a completed payment are hidden."""
    return OrderListResponse(
        orders=[
            OrderSummaryResponse(
                order_id=str(entry.order_id),
                customer_id=str(entry.customer_id),
                fulfillment_stage=entry.fulfillment_stage,
                stage_label=entry.stage_label,
                includes_device=bool(entry.includes_device),
                total_cost=entry.total_cost,
                estimated_delivery=_iso(entry.estimated_delivery),
                delivered_at=_iso(entry.delivered_at),
                placed_at=_iso(entry.placed_at),
            )
            for entry in orders_for_customer(customer_id)
        ]
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    """Order detail with audit trail, delay status and operator stage options."""
    order = current_domain.repository_for(StarterPackOrder).get(order_id)
    return _order_response(order, datetime.now(UTC))
