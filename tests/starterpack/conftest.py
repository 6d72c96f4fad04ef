from datetime import UTC, datetime

import pytest
from starterpack.order.order import StarterPackOrder

CREATED_AT = datetime(2024, 1, 1, tzinfo=UTC)

ADDRESS = {
    "address_line1": "Shop 4, Marina Walk",
    "address_line2": "Tower B",
    "city": "Dubai",
    "region": "Dubai",
    "contact_number": "+971500000000",
}


@pytest.fixture()
def address():
    return dict(ADDRESS)


@pytest.fixture()
def free_order():
    """A starter pack without a device: settled as waived, already received."""
    return StarterPackOrder.create(
        customer_id="cust-001",
        includes_device=False,
        delivery_address=ADDRESS,
        now=CREATED_AT,
    )


@pytest.fixture()
def device_order():
    """A starter pack with a device, waiting on the payment gateway."""
    return StarterPackOrder.create(
        customer_id="cust-002",
        includes_device=True,
        delivery_address=ADDRESS,
        merchant_id="merchant-001",
        now=CREATED_AT,
    )
