"""Fulfillment stages: the fixed, linear pipeline a starter pack moves through.

    pending → received → preparing → configuring → out_for_delivery → delivered

Only the current stage and the one right after it are ever reachable. Earlier
stages are history; operator dashboards show them as completed.
"""

from dataclasses import dataclass
from enum import Enum


class FulfillmentStage(Enum):
    PENDING = "pending"
    RECEIVED = "received"
    PREPARING = "preparing"
    CONFIGURING = "configuring"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"


STAGE_SEQUENCE = tuple(FulfillmentStage)

_STAGE_LABELS = {
    FulfillmentStage.PENDING: "Pending",
    FulfillmentStage.RECEIVED: "Order Received",
    FulfillmentStage.PREPARING: "Preparing",
    FulfillmentStage.CONFIGURING: "Configuring",
    FulfillmentStage.OUT_FOR_DELIVERY: "Out for Delivery",
    FulfillmentStage.DELIVERED: "Delivered",
}

# Once a package is on the road, the delivery estimate stops being a risk signal
IN_CUSTOMER_HANDS = frozenset({FulfillmentStage.OUT_FOR_DELIVERY, FulfillmentStage.DELIVERED})


def as_stage(stage: str | FulfillmentStage) -> FulfillmentStage:
    """Coerce a stage name into a FulfillmentStage, raising ValueError if unknown."""
    if isinstance(stage, FulfillmentStage):
        return stage
    return FulfillmentStage(stage)


def stage_index(stage: str | FulfillmentStage) -> int:
    """Return the 0-based position of a stage in the pipeline."""
    return STAGE_SEQUENCE.index(as_stage(stage))


def next_stage(stage: str | FulfillmentStage) -> FulfillmentStage | None:
    """Return the stage immediately after ``stage``, or None when it is terminal."""
    position = stage_index(stage)
    if position + 1 >= len(STAGE_SEQUENCE):
        return None
    return STAGE_SEQUENCE[position + 1]


def stage_label(stage: str | FulfillmentStage) -> str:
    return _STAGE_LABELS[as_stage(stage)]


@dataclass(frozen=True)
class StageOption:
    """How a single stage is presented to an operator updating an order."""

    stage: str
    label: str
    state: str  # completed | current | next | upcoming
    selectable: bool


def stage_options(current: str | FulfillmentStage) -> list[StageOption]:
    """List every stage with its gating state relative to ``current``.

    Only the current stage and the immediate next one are selectable.
    """
    current_index = stage_index(current)
    options = []
    for position, stage in enumerate(STAGE_SEQUENCE):
        if position < current_index:
            state = "completed"
        elif position == current_index:
            state = "current"
        elif position == current_index + 1:
            state = "next"
        else:
            state = "upcoming"
        options.append(
            StageOption(
                stage=stage.value,
                label=_STAGE_LABELS[stage],
                state=state,
                selectable=state in ("current", "next"),
            )
        )
    return options
