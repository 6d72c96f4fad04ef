"""StarterPackOrder aggregate (CQRS): the core of the starter pack domain.

An order has two independent state axes:

Fulfillment (monotonic, one step at a time):
    PENDING → RECEIVED → PREPARING → CONFIGURING → OUT_FOR_DELIVERY → DELIVERED

Payment (settled exactly once):
    PENDING → COMPLETED | FAILED

Fulfillment can only leave PENDING once payment is COMPLETED. Each stage entry
is stamped into an append-only audit trail.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from starterpack.domain import starterpack
from starterpack.order.errors import AlreadySettled, InvalidState, InvalidTransition, StaleRead
from starterpack.order.events import (
    FulfillmentStageAdvanced,
    PaymentSettled,
    ProofOfDeliveryAttached,
    StarterPackOrderPlaced,
)
from starterpack.order.sla import delay_message, estimate_delivery, is_delayed
from starterpack.order.stages import FulfillmentStage, as_stage, next_stage

BASE_COST = 0.0
DEVICE_COST = 499.0


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class SettlementOutcome(Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    WAIVED = "waived"


class SettlementKind(Enum):
    UNPAID = "unpaid"
    WAIVED = "waived"
    CAPTURED = "captured"
    DECLINED = "declined"


_SETTLEMENTS = {
    SettlementOutcome.COMPLETED: (SettlementKind.CAPTURED, PaymentStatus.COMPLETED),
    SettlementOutcome.FAILED: (SettlementKind.DECLINED, PaymentStatus.FAILED),
    SettlementOutcome.WAIVED: (SettlementKind.WAIVED, PaymentStatus.COMPLETED),
}


def calculate_total_cost(includes_device: bool) -> float:
    return BASE_COST + (DEVICE_COST if includes_device else 0.0)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@starterpack.value_object(part_of="StarterPackOrder")
class DeliveryAddress:
    """Where the starter pack is delivered.

    Validated upstream by the address collection flow and captured once at
    order creation; later changes elsewhere never reach an existing order.
    """

    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    region = String(required=True, max_length=100)
    contact_number = String(required=True, max_length=30)


@starterpack.value_object(part_of="StarterPackOrder")
class Settlement:
    """Payment gateway outcome: unpaid, waived, captured(ref) or declined(ref)."""

    kind = String(choices=SettlementKind, default=SettlementKind.UNPAID.value)
    reference = String(max_length=255)
    settled_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@starterpack.aggregate
class StarterPackOrder:
    customer_id = Identifier(required=True)
    merchant_id = Identifier()
    includes_device = Boolean(default=False)
    device_cost = Float(default=0.0)
    total_cost = Float(default=0.0)
    fulfillment_stage = String(
        choices=FulfillmentStage,
        default=FulfillmentStage.PENDING.value,
    )
    payment_status = String(
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    settlement = ValueObject(Settlement)
    delivery_address = ValueObject(DeliveryAddress)
    estimated_delivery = DateTime()
    delivered_at = DateTime()
    stage_timestamps = Text(default="{}")  # JSON map of stage name -> ISO instant
    proof_of_delivery = String(max_length=1000)
    revision = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        customer_id: str,
        includes_device: bool,
        delivery_address: dict,
        merchant_id: str | None = None,
        now: datetime | None = None,
    ):
        """Place a new starter pack order.

        Free orders settle as waived straight away and start in RECEIVED.
        Orders with a device wait in PENDING for the gateway outcome.
        """
        now = now or datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            merchant_id=merchant_id,
            includes_device=includes_device,
            device_cost=DEVICE_COST if includes_device else 0.0,
            total_cost=calculate_total_cost(includes_device),
            fulfillment_stage=FulfillmentStage.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            settlement=Settlement(kind=SettlementKind.UNPAID.value),
            delivery_address=DeliveryAddress(**delivery_address),
            created_at=now,
            updated_at=now,
        )

        if order.total_cost == 0:
            order._settle(SettlementOutcome.WAIVED, None, now)
        else:
            order._stamp(FulfillmentStage.PENDING, now)

        order.raise_(
            StarterPackOrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                merchant_id=merchant_id,
                includes_device=includes_device,
                total_cost=order.total_cost,
                fulfillment_stage=order.fulfillment_stage,
                payment_status=order.payment_status,
                delivery_city=order.delivery_address.city,
                estimated_delivery=order.estimated_delivery,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def audit_trail(self) -> dict[str, str]:
        """Stage name -> ISO instant the order entered that stage."""
        return json.loads(self.stage_timestamps or "{}")

    @property
    def settlement_reference(self) -> str | None:
        return self.settlement.reference if self.settlement else None

    def is_visible(self) -> bool:
        """Whether the order may appear in the customer's order history."""
        return PaymentStatus(self.payment_status) == PaymentStatus.COMPLETED

    def is_delayed(self, now: datetime) -> bool:
        return is_delayed(now, self.fulfillment_stage, self.estimated_delivery)

    def delay_message(self, now: datetime) -> str | None:
        if not self.is_delayed(now):
            return None
        return delay_message(now, self.estimated_delivery)

    # -------------------------------------------------------------------
    # Optimistic concurrency
    # -------------------------------------------------------------------
    def assert_revision(self, expected_revision: int | None) -> None:
        """Fail with StaleRead if the caller acted on an older copy of the order."""
        if expected_revision is None:
            return
        if expected_revision != self.revision:
            raise StaleRead(
                {"revision": [f"Order is at revision {self.revision}, caller expected {expected_revision}"]}
            )

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def advance(self, target_stage: str | FulfillmentStage, now: datetime | None = None) -> None:
        """Move to ``target_stage``, which must be the current stage or the next one."""
        current = FulfillmentStage(self.fulfillment_stage)
        try:
            target = as_stage(target_stage)
        except ValueError:
            raise InvalidTransition({"fulfillment_stage": [f"Unknown fulfillment stage {target_stage}"]}) from None

        if target == current:
            return

        if target != next_stage(current):
            raise InvalidTransition(
                {"fulfillment_stage": [f"Cannot transition from {current.value} to {target.value}"]}
            )
        if PaymentStatus(self.payment_status) != PaymentStatus.COMPLETED:
            raise InvalidTransition(
                {"fulfillment_stage": [f"Cannot move to {target.value} before payment is completed"]}
            )

        now = now or datetime.now(UTC)
        self._enter_stage(target, now)
        self._touch(now)
        self._raise_stage_advanced(current, target, now)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def record_settlement(
        self,
        outcome: str | SettlementOutcome,
        settlement_reference: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Record the gateway outcome. A payment settles exactly once."""
        if PaymentStatus(self.payment_status) != PaymentStatus.PENDING:
            raise AlreadySettled({"payment_status": [f"Payment is already {self.payment_status}"]})

        try:
            outcome = SettlementOutcome(outcome)
        except ValueError:
            raise ValidationError({"outcome": [f"Unknown settlement outcome {outcome}"]}) from None
        if outcome == SettlementOutcome.WAIVED and settlement_reference:
            raise ValidationError({"settlement_reference": ["A waived settlement carries no reference"]})
        if outcome != SettlementOutcome.WAIVED and not settlement_reference:
            raise ValidationError({"settlement_reference": ["Settlement reference is required"]})

        now = now or datetime.now(UTC)
        previous_stage = FulfillmentStage(self.fulfillment_stage)
        self._settle(outcome, settlement_reference, now)
        self._touch(now)

        self.raise_(
            PaymentSettled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                merchant_id=self.merchant_id,
                payment_status=self.payment_status,
                settlement_kind=self.settlement.kind,
                settlement_reference=self.settlement.reference,
                fulfillment_stage=self.fulfillment_stage,
                includes_device=self.includes_device,
                total_cost=self.total_cost,
                estimated_delivery=self.estimated_delivery,
                placed_at=self.created_at,
                settled_at=now,
            )
        )
        current_stage = FulfillmentStage(self.fulfillment_stage)
        if current_stage != previous_stage:
            self._raise_stage_advanced(previous_stage, current_stage, now)

    # -------------------------------------------------------------------
    # Delivery proof
    # -------------------------------------------------------------------
    def attach_proof(self, proof_reference: str, now: datetime | None = None) -> None:
        """Attach (or replace) the delivery photo. Only allowed once delivered."""
        if FulfillmentStage(self.fulfillment_stage) != FulfillmentStage.DELIVERED:
            raise InvalidState(
                {"fulfillment_stage": [f"Proof of delivery requires a delivered order, not {self.fulfillment_stage}"]}
            )
        if not proof_reference:
            raise ValidationError({"proof_reference": ["Proof of delivery reference is required"]})

        now = now or datetime.now(UTC)
        self.proof_of_delivery = proof_reference
        self._touch(now)
        self.raise_(
            ProofOfDeliveryAttached(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                proof_reference=proof_reference,
                attached_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Internal state changes (no events, no revision bump)
    # -------------------------------------------------------------------
    def _settle(self, outcome: SettlementOutcome, reference: str | None, now: datetime) -> None:
        kind, payment_status = _SETTLEMENTS[outcome]
        self.payment_status = payment_status.value
        self.settlement = Settlement(kind=kind.value, reference=reference, settled_at=now)

        if payment_status == PaymentStatus.COMPLETED and (
            FulfillmentStage(self.fulfillment_stage) == FulfillmentStage.PENDING
        ):
            self._enter_stage(FulfillmentStage.RECEIVED, now)

    def _enter_stage(self, stage: FulfillmentStage, now: datetime) -> None:
        self.fulfillment_stage = stage.value
        self._stamp(stage, now)

        if stage == FulfillmentStage.RECEIVED and self.estimated_delivery is None:
            self.estimated_delivery = estimate_delivery(self.created_at)
        if stage == FulfillmentStage.DELIVERED:
            self.delivered_at = now

    def _stamp(self, stage: FulfillmentStage, now: datetime) -> None:
        trail = self.audit_trail
        if stage.value in trail:
            return
        trail[stage.value] = now.isoformat()
        self.stage_timestamps = json.dumps(trail)

    def _touch(self, now: datetime) -> None:
        self.revision = (self.revision or 0) + 1
        self.updated_at = now

    def _raise_stage_advanced(self, from_stage: FulfillmentStage, to_stage: FulfillmentStage, now: datetime) -> None:
        self.raise_(
            FulfillmentStageAdvanced(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                from_stage=from_stage.value,
                to_stage=to_stage.value,
                estimated_delivery=self.estimated_delivery,
                delivered_at=self.delivered_at,
                entered_at=now,
            )
        )
