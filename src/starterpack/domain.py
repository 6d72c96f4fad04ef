"""Starter pack bounded context: order fulfillment lifecycle.

Tracks a starter pack order from payment settlement through warehouse
preparation, device configuration and last-mile delivery. Uses CQRS because
the pipeline is a single linear state machine with one orthogonal payment axis.
"""

from protean.domain import Domain

from starterpack.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

starterpack = Domain(name="starterpack")
