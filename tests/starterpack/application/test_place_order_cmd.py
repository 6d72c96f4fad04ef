"""Application tests for order placement via domain.process()."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from starterpack.order.order import StarterPackOrder
from starterpack.order.placement import PlaceStarterPackOrder

ADDRESS = {
    "address_line1": "Shop 4, Marina Walk",
    "city": "Dubai",
    "region": "Dubai",
    "contact_number": "+971500000000",
}


def _place(includes_device=False, **overrides):
    fields = {
        "customer_id": "cust-app-001",
        "includes_device": includes_device,
        "delivery_address": json.dumps(ADDRESS),
        **overrides,
    }
    return current_domain.process(PlaceStarterPackOrder(**fields), asynchronous=False)


class TestPlaceStarterPackOrder:
    def test_returns_order_id_and_persists(self):
        order_id = _place()
        order = current_domain.repository_for(StarterPackOrder).get(order_id)
        assert str(order.customer_id) == "cust-app-001"

    def test_free_order_persisted_as_received(self):
        order = current_domain.repository_for(StarterPackOrder).get(_place())
        assert order.fulfillment_stage == "received"
        assert order.payment_status == "completed"
        assert order.estimated_delivery is not None

    def test_device_order_persisted_as_pending(self):
        order = current_domain.repository_for(StarterPackOrder).get(_place(includes_device=True))
        assert order.fulfillment_stage == "pending"
        assert order.payment_status == "pending"
        assert order.total_cost == 499

    def test_merchant_is_recorded(self):
        order = current_domain.repository_for(StarterPackOrder).get(_place(merchant_id="merchant-001"))
        assert str(order.merchant_id) == "merchant-001"

    def test_address_is_persisted(self):
        order = current_domain.repository_for(StarterPackOrder).get(_place())
        assert order.delivery_address.city == "Dubai"
        assert order.delivery_address.contact_number == "+971500000000"

    def test_incomplete_address_is_rejected(self):
        with pytest.raises(ValidationError):
            _place(delivery_address=json.dumps({"address_line1": "Somewhere"}))
