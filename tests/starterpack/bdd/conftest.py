"""Shared BDD fixtures and step definitions for starter pack orders."""

from datetime import datetime

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from starterpack.order.order import StarterPackOrder

_ADDRESS = {
    "address_line1": "Shop 4, Marina Walk",
    "city": "Dubai",
    "region": "Dubai",
    "contact_number": "+971500000000",
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


def _attempt(error, action, *args):
    try:
        action(*args)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a starter pack order without a device created at "{created_at}"'),
    target_fixture="order",
)
def free_order(created_at):
    return StarterPackOrder.create(
        customer_id="cust-bdd",
        includes_device=False,
        delivery_address=_ADDRESS,
        now=datetime.fromisoformat(created_at),
    )


@given("a starter pack order with a device awaiting payment", target_fixture="order")
def device_order():
    return StarterPackOrder.create(
        customer_id="cust-bdd",
        includes_device=True,
        delivery_address=_ADDRESS,
    )


@given(parsers.cfparse('the order has advanced through "{stages}"'))
def advanced_through(order, stages):
    for stage in stages.split(", "):
        order.advance(stage)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the order advances through "{stages}"'))
def advance_through(order, error, stages):
    for stage in stages.split(", "):
        _attempt(error, order.advance, stage)


@when(parsers.cfparse('the order advances to "{stage}"'))
def advance_to(order, error, stage):
    _attempt(error, order.advance, stage)


@when(parsers.cfparse('the payment settles as "{outcome}" with reference "{reference}"'))
def settle(order, error, outcome, reference):
    _attempt(error, order.record_settlement, outcome, reference)


@when(parsers.cfparse('proof of delivery "{reference}" is attached'))
def attach_proof(order, error, reference):
    _attempt(error, order.attach_proof, reference)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the total cost is {cost:d}"))
def total_cost_is(order, cost):
    assert order.total_cost == cost


@then(parsers.cfparse('the fulfillment stage is "{stage}"'))
def stage_is(order, stage):
    assert order.fulfillment_stage == stage


@then(parsers.cfparse('the payment status is "{status}"'))
def payment_status_is(order, status):
    assert order.payment_status == status


@then(parsers.cfparse('the estimated delivery is "{instant}"'))
def estimated_delivery_is(order, instant):
    assert order.estimated_delivery == datetime.fromisoformat(instant)


@then(parsers.cfparse('the audit trail has a "{stage}" entry'))
def audit_trail_has(order, stage):
    assert stage in order.audit_trail


@then(parsers.cfparse('the settlement reference is "{reference}"'))
def settlement_reference_is(order, reference):
    assert order.settlement_reference == reference


@then("the delivered timestamp is set")
def delivered_timestamp_set(order):
    assert order.delivered_at is not None


@then(parsers.cfparse('the proof of delivery is "{reference}"'))
def proof_is(order, reference):
    assert order.proof_of_delivery == reference


@then(parsers.cfparse('the action fails with "{error_name}"'))
def action_fails_with(error, error_name):
    assert error["exc"] is not None, "Expected the action to fail"
    assert type(error["exc"]).__name__ == error_name
