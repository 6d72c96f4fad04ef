"""Delivery SLA: estimated delivery and delay detection.

Everything here is a pure function of its arguments. Callers supply ``now``,
so polling UIs and tests get the same answers without timers.
"""

from datetime import datetime, timedelta

from starterpack.order.stages import IN_CUSTOMER_HANDS, FulfillmentStage, as_stage

SERVICE_WINDOW = timedelta(hours=9)

_ONE_HOUR = timedelta(hours=1)
_ESCALATION_HOURS = 3


def estimate_delivery(created_at: datetime) -> datetime:
    """Return the promised delivery instant for an order created at ``created_at``."""
    return created_at + SERVICE_WINDOW


def is_delayed(
    now: datetime,
    fulfillment_stage: str | FulfillmentStage,
    estimated_delivery: datetime | None,
) -> bool:
    if as_stage(fulfillment_stage) in IN_CUSTOMER_HANDS:
        return False
    if estimated_delivery is None:
        return False
    return now > estimated_delivery


def delay_message(now: datetime, estimated_delivery: datetime) -> str:
    """Customer-facing apology, graded by whole hours past the estimate.

    Under an hour gets a mild apology, one to three hours quotes the hour
    count, anything longer is escalated to support without a number.
    """
    delay_hours = (now - estimated_delivery) // _ONE_HOUR

    if delay_hours < 1:
        return "Your order is slightly delayed. We apologize for the inconvenience."
    if delay_hours < _ESCALATION_HOURS:
        unit = "hour" if delay_hours == 1 else "hours"
        return (
            f"Your order is delayed by approximately {delay_hours} {unit}. "
            "Our team is working to get it to you as soon as possible."
        )
    return (
        "We sincerely apologize for the delay. Your order is taking longer than expected. "
        "Please contact support for more information."
    )
