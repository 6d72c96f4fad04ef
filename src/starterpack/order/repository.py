"""Repository for the StarterPackOrder aggregate."""

from protean.exceptions import ExpectedVersionError

from starterpack.domain import starterpack
from starterpack.order.errors import StaleRead
from starterpack.order.order import StarterPackOrder

STALE_SAVE_MESSAGE = "Order was changed by someone else; reload it and try again"


@starterpack.repository(part_of=StarterPackOrder)
class StarterPackOrderRepository:
    """Saving a copy loaded before someone else's save fails with StaleRead."""

    def add(self, order: StarterPackOrder) -> StarterPackOrder:
        try:
            return super().add(order)
        except ExpectedVersionError as exc:
            raise StaleRead({"revision": [STALE_SAVE_MESSAGE]}) from exc
