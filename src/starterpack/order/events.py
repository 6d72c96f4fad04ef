"""Starter pack order events: immutable facts about lifecycle changes.

Events carry enough state for the read-side projections to stay current
without reloading the aggregate.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from starterpack.domain import starterpack


@starterpack.event(part_of="StarterPackOrder")
class StarterPackOrderPlaced:
    """A starter pack order was placed."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    merchant_id = Identifier()
    includes_device = Boolean(default=False)
    total_cost = Float(required=True)
    fulfillment_stage = String(required=True)
    payment_status = String(required=True)
    delivery_city = String()
    estimated_delivery = DateTime()
    placed_at = DateTime(required=True)


@starterpack.event(part_of="StarterPackOrder")
class PaymentSettled:
    """The payment gateway outcome was recorded against an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    merchant_id = Identifier()
    payment_status = String(required=True)
    settlement_kind = String(required=True)
    settlement_reference = String()
    fulfillment_stage = String(required=True)
    includes_device = Boolean(default=False)
    total_cost = Float(required=True)
    estimated_delivery = DateTime()
    placed_at = DateTime(required=True)
    settled_at = DateTime(required=True)


@starterpack.event(part_of="StarterPackOrder")
class FulfillmentStageAdvanced:
    """An order entered the next fulfillment stage."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    from_stage = String(required=True)
    to_stage = String(required=True)
    estimated_delivery = DateTime()
    delivered_at = DateTime()
    entered_at = DateTime(required=True)


@starterpack.event(part_of="StarterPackOrder")
class ProofOfDeliveryAttached:
    """A delivery photo was attached (or retaken) for a delivered order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    proof_reference = String(required=True)
    attached_at = DateTime(required=True)
