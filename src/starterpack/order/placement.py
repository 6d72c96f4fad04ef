"""Order placement: command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Text
from protean.utils.globals import current_domain

from starterpack.domain import starterpack
from starterpack.order.order import StarterPackOrder
from starterpack.utils.logging import order_context

logger = structlog.get_logger(__name__)


@starterpack.command(part_of="StarterPackOrder")
class PlaceStarterPackOrder:
    """Place a starter pack order with an already validated delivery address."""

    customer_id = Identifier(required=True)
    merchant_id = Identifier()
    includes_device = Boolean(default=False)
    delivery_address = Text(required=True)  # JSON dict of address fields


@starterpack.command_handler(part_of=StarterPackOrder)
class PlaceStarterPackOrderHandler:
    @handle(PlaceStarterPackOrder)
    def place_order(self, command):
        address = (
            json.loads(command.delivery_address)
            if isinstance(command.delivery_address, str)
            else command.delivery_address
        )
        order = StarterPackOrder.create(
            customer_id=command.customer_id,
            includes_device=bool(command.includes_device),
            delivery_address=address,
            merchant_id=command.merchant_id,
        )
        with order_context(order.id):
            current_domain.repository_for(StarterPackOrder).add(order)
            logger.info(
                "Starter pack order placed",
                customer_id=str(order.customer_id),
                total_cost=order.total_cost,
                payment_status=order.payment_status,
            )
        return str(order.id)
