"""Fulfillment progression: operator moves an order to its next stage."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from starterpack.domain import starterpack
from starterpack.order.order import StarterPackOrder
from starterpack.utils.logging import order_context

logger = structlog.get_logger(__name__)


@starterpack.command(part_of="StarterPackOrder")
class AdvanceFulfillmentStage:
    """Move an order to ``stage``. Re-sending the current stage is a no-op."""

    order_id = Identifier(required=True)
    stage = String(required=True, max_length=50)
    expected_revision = Integer()


@starterpack.command_handler(part_of=StarterPackOrder)
class FulfillmentProgressionHandler:
    @handle(AdvanceFulfillmentStage)
    def advance_stage(self, command):
        repo = current_domain.repository_for(StarterPackOrder)
        with order_context(command.order_id):
            order = repo.get(command.order_id)
            order.assert_revision(command.expected_revision)

            previous_stage = order.fulfillment_stage
            order.advance(command.stage)
            repo.add(order)

            if order.fulfillment_stage != previous_stage:
                logger.info(
                    "Fulfillment stage advanced",
                    from_stage=previous_stage,
                    to_stage=order.fulfillment_stage,
                )
