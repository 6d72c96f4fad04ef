"""Starter pack order board: every order, for operators working the pipeline."""

from protean.core.projector import on
from protean.fields import Boolean, DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from starterpack.domain import starterpack
from starterpack.order.events import (
    FulfillmentStageAdvanced,
    PaymentSettled,
    ProofOfDeliveryAttached,
    StarterPackOrderPlaced,
)
from starterpack.order.order import StarterPackOrder


@starterpack.projection
class StarterPackOrderBoard:
    order_id = Identifier(identifier=True, required=True)
    customer_id = Identifier(required=True)
    merchant_id = Identifier()
    fulfillment_stage = String(required=True, max_length=50)
    payment_status = String(required=True, max_length=50)
    settlement_reference = String(max_length=255)
    includes_device = Boolean(default=False)
    total_cost = Float(default=0.0)
    delivery_city = String(max_length=100)
    estimated_delivery = DateTime()
    delivered_at = DateTime()
    has_proof = Boolean(default=False)
    placed_at = DateTime()
    updated_at = DateTime()


def all_orders() -> list[StarterPackOrderBoard]:
    """Every order on the board, newest first."""
    results = current_domain.repository_for(StarterPackOrderBoard)._dao.query.all().items
    return sorted(results, key=lambda row: row.placed_at, reverse=True)


@starterpack.projector(projector_for=StarterPackOrderBoard, aggregates=[StarterPackOrder])
class StarterPackOrderBoardProjector:
    @on(StarterPackOrderPlaced)
    def on_order_placed(self, event):
        current_domain.repository_for(StarterPackOrderBoard).add(
            StarterPackOrderBoard(
                order_id=event.order_id,
                customer_id=event.customer_id,
                merchant_id=event.merchant_id,
                fulfillment_stage=event.fulfillment_stage,
                payment_status=event.payment_status,
                includes_device=event.includes_device,
                total_cost=event.total_cost,
                delivery_city=event.delivery_city,
                estimated_delivery=event.estimated_delivery,
                placed_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    @on(PaymentSettled)
    def on_payment_settled(self, event):
        repo = current_domain.repository_for(StarterPackOrderBoard)
        row = repo.get(event.order_id)
        row.payment_status = event.payment_status
        row.settlement_reference = event.settlement_reference
        row.fulfillment_stage = event.fulfillment_stage
        row.estimated_delivery = event.estimated_delivery
        row.updated_at = event.settled_at
        repo.add(row)

    @on(FulfillmentStageAdvanced)
    def on_stage_advanced(self, event):
        repo = current_domain.repository_for(StarterPackOrderBoard)
        row = repo.get(event.order_id)
        row.fulfillment_stage = event.to_stage
        row.estimated_delivery = event.estimated_delivery
        row.delivered_at = event.delivered_at
        row.updated_at = event.entered_at
        repo.add(row)

    @on(ProofOfDeliveryAttached)
    def on_proof_attached(self, event):
        repo = current_domain.repository_for(StarterPackOrderBoard)
        row = repo.get(event.order_id)
        row.has_proof = True
        row.updated_at = event.attached_at
        repo.add(row)
