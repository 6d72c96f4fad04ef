"""Customer order history: the starter pack orders a customer can see.

Only orders whose payment completed are listed; pending and failed payments
never reach the customer's history.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from starterpack.domain import starterpack
from starterpack.order.events import (
    FulfillmentStageAdvanced,
    PaymentSettled,
    ProofOfDeliveryAttached,
    StarterPackOrderPlaced,
)
from starterpack.order.order import PaymentStatus, StarterPackOrder
from starterpack.order import stages


@starterpack.projection
class CustomerOrderHistory:
    order_id = Identifier(identifier=True, required=True)
    customer_id = Identifier(required=True)
    fulfillment_stage = String(required=True, max_length=50)
    stage_label = String(max_length=50)
    includes_device = Boolean(default=False)
    total_cost = Float(default=0.0)
    estimated_delivery = DateTime()
    delivered_at = DateTime()
    proof_of_delivery = String(max_length=1000)
    placed_at = DateTime()
    updated_at = DateTime()


def _list_entry(event, updated_at):
    return CustomerOrderHistory(
        order_id=event.order_id,
        customer_id=event.customer_id,
        fulfillment_stage=event.fulfillment_stage,
        stage_label=stages.stage_label(event.fulfillment_stage),
        includes_device=event.includes_device,
        total_cost=event.total_cost,
        estimated_delivery=event.estimated_delivery,
        placed_at=event.placed_at,
        updated_at=updated_at,
    )


def orders_for_customer(customer_id: str) -> list[CustomerOrderHistory]:
    """Visible orders of a customer, newest first."""
    repo = current_domain.repository_for(CustomerOrderHistory)
    results = repo._dao.query.filter(customer_id=customer_id).all().items
    return sorted(results, key=lambda entry: entry.placed_at, reverse=True)


@starterpack.projector(projector_for=CustomerOrderHistory, aggregates=[StarterPackOrder])
class CustomerOrderHistoryProjector:
    @on(StarterPackOrderPlaced)
    def on_order_placed(self, event):
        if event.payment_status != PaymentStatus.COMPLETED.value:
            return
        current_domain.repository_for(CustomerOrderHistory).add(_list_entry(event, event.placed_at))

    @on(PaymentSettled)
    def on_payment_settled(self, event):
        if event.payment_status != PaymentStatus.COMPLETED.value:
            return
        current_domain.repository_for(CustomerOrderHistory).add(_list_entry(event, event.settled_at))

    @on(FulfillmentStageAdvanced)
    def on_stage_advanced(self, event):
        repo = current_domain.repository_for(CustomerOrderHistory)
        try:
            entry = repo.get(event.order_id)
        except ObjectNotFoundError:
            return
        entry.fulfillment_stage = event.to_stage
        entry.stage_label = stages.stage_label(event.to_stage)
        entry.estimated_delivery = event.estimated_delivery
        entry.delivered_at = event.delivered_at
        entry.updated_at = event.entered_at
        repo.add(entry)

    @on(ProofOfDeliveryAttached)
    def on_proof_attached(self, event):
        repo = current_domain.repository_for(CustomerOrderHistory)
        try:
            entry = repo.get(event.order_id)
        except ObjectNotFoundError:
            return
        entry.proof_of_delivery = event.proof_reference
        entry.updated_at = event.attached_at
        repo.add(entry)
