"""Tests for StarterPackOrder creation: pricing, initial states and address capture."""

from datetime import UTC, datetime

import pytest
from protean.exceptions import ValidationError
from starterpack.order.order import (
    DEVICE_COST,
    PaymentStatus,
    SettlementKind,
    StarterPackOrder,
    calculate_total_cost,
)
from starterpack.order.stages import FulfillmentStage


class TestFreeOrder:
    def test_total_cost_is_zero(self, free_order):
        assert free_order.total_cost == 0
        assert free_order.device_cost == 0

    def test_starts_received_with_completed_payment(self, free_order):
        assert free_order.fulfillment_stage == FulfillmentStage.RECEIVED.value
        assert free_order.payment_status == PaymentStatus.COMPLETED.value

    def test_settlement_is_waived_without_reference(self, free_order):
        assert free_order.settlement.kind == SettlementKind.WAIVED.value
        assert free_order.settlement_reference is None

    def test_estimated_delivery_is_nine_hours_after_creation(self, free_order):
        assert free_order.estimated_delivery == datetime(2024, 1, 1, 9, 0, tzinfo=UTC)

    def test_audit_trail_has_only_received(self, free_order):
        assert free_order.audit_trail == {"received": "2024-01-01T00:00:00+00:00"}

    def test_is_visible(self, free_order):
        assert free_order.is_visible()

    def test_revision_starts_at_zero(self, free_order):
        assert free_order.revision == 0


class TestDeviceOrder:
    def test_total_cost_includes_device(self, device_order):
        assert device_order.device_cost == DEVICE_COST
        assert device_order.total_cost == 499

    def test_starts_pending_on_both_axes(self, device_order):
        assert device_order.fulfillment_stage == FulfillmentStage.PENDING.value
        assert device_order.payment_status == PaymentStatus.PENDING.value
        assert device_order.settlement.kind == SettlementKind.UNPAID.value

    def test_pending_entry_recorded(self, device_order):
        assert list(device_order.audit_trail) == ["pending"]

    def test_no_estimate_until_received(self, device_order):
        assert device_order.estimated_delivery is None
        assert device_order.delivered_at is None

    def test_not_visible_while_payment_pending(self, device_order):
        assert not device_order.is_visible()

    def test_merchant_is_kept(self, device_order):
        assert device_order.merchant_id == "merchant-001"


class TestPricing:
    @pytest.mark.parametrize("includes_device, expected", [(False, 0.0), (True, 499.0)])
    def test_calculate_total_cost(self, includes_device, expected):
        assert calculate_total_cost(includes_device) == expected


class TestDeliveryAddress:
    def test_address_is_captured(self, free_order, address):
        assert free_order.delivery_address.address_line1 == address["address_line1"]
        assert free_order.delivery_address.city == "Dubai"
        assert free_order.delivery_address.region == "Dubai"
        assert free_order.delivery_address.contact_number == "+971500000000"

    def test_address_line2_is_optional(self, address):
        del address["address_line2"]
        order = StarterPackOrder.create(customer_id="cust-003", includes_device=False, delivery_address=address)
        assert order.delivery_address.address_line2 is None

    def test_missing_city_is_rejected(self, address):
        del address["city"]
        with pytest.raises(ValidationError):
            StarterPackOrder.create(customer_id="cust-003", includes_device=False, delivery_address=address)

    def test_customer_is_required(self, address):
        with pytest.raises(ValidationError):
            StarterPackOrder.create(customer_id=None, includes_device=False, delivery_address=address)
