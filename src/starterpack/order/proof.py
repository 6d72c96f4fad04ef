"""Proof of delivery: courier photo attached to a delivered order."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from starterpack.domain import starterpack
from starterpack.order.order import StarterPackOrder
from starterpack.utils.logging import order_context

logger = structlog.get_logger(__name__)


@starterpack.command(part_of="StarterPackOrder")
class AttachProofOfDelivery:
    """Attach a photo reference (URL or storage handle). Retakes overwrite."""

    order_id = Identifier(required=True)
    proof_reference = String(required=True, max_length=1000)
    expected_revision = Integer()


@starterpack.command_handler(part_of=StarterPackOrder)
class ProofOfDeliveryHandler:
    @handle(AttachProofOfDelivery)
    def attach_proof(self, command):
        repo = current_domain.repository_for(StarterPackOrder)
        with order_context(command.order_id):
            order = repo.get(command.order_id)
            order.assert_revision(command.expected_revision)

            order.attach_proof(command.proof_reference)
            repo.add(order)
            logger.info("Proof of delivery attached")
