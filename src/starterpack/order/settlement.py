"""Payment settlement: records the gateway outcome against an order.

The gateway flow itself (tokenisation, authorisation) happens elsewhere; this
handler only receives its result and reference.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from starterpack.domain import starterpack
from starterpack.order.order import PaymentStatus, SettlementOutcome, StarterPackOrder
from starterpack.utils.logging import order_context

logger = structlog.get_logger(__name__)


@starterpack.command(part_of="StarterPackOrder")
class RecordSettlement:
    order_id = Identifier(required=True)
    outcome = String(required=True, choices=SettlementOutcome)
    settlement_reference = String(max_length=255)
    expected_revision = Integer()


@starterpack.command_handler(part_of=StarterPackOrder)
class SettlementHandler:
    @handle(RecordSettlement)
    def record_settlement(self, command):
        repo = current_domain.repository_for(StarterPackOrder)
        with order_context(command.order_id):
            order = repo.get(command.order_id)
            order.assert_revision(command.expected_revision)

            order.record_settlement(command.outcome, command.settlement_reference)
            repo.add(order)

            log = logger.warning if order.payment_status == PaymentStatus.FAILED.value else logger.info
            log(
                "Payment settled",
                outcome=command.outcome,
                settlement_reference=command.settlement_reference,
                fulfillment_stage=order.fulfillment_stage,
            )
