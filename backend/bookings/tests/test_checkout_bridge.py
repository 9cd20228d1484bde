from datetime import date

import pytest

from bookings.services.checkout import (
    BOOKING_FAILED,
    PAYMENT_FAILED,
    VALIDATION_ERROR,
    Canceled,
    CheckoutBridge,
    CheckoutOrder,
    Committing,
    Confirming,
    Done,
    PaymentMethodSelected,
    SheetCanceled,
    build_sheet_configuration,
)
from bookings.services.gateways import IntentTicket
from payments.exceptions import PersistenceError, UpstreamError, ValidationError

TODAY = date(2026, 10, 19)


class RecordingGateway:
    def __init__(self, *, intent=None, secret="sec_1", create_error=None, pay_error=None):
        self.intent = intent or IntentTicket(intent_id="pi_1", client_secret="pi_1_secret_abc", customer_id="cus_1")
        self.secret = secret
        self.create_error = create_error
        self.pay_error = pay_error
        self.calls = []

    def create_intent(self, *, name, email, amount):
        self.calls.append(("create", {"name": name, "email": email, "amount": amount}))
        if self.create_error:
            raise self.create_error
        return self.intent

    def pay(self, *, payment_method_id, payment_intent_id, customer_id, client_secret):
        self.calls.append(
            (
                "pay",
                {
                    "payment_method_id": payment_method_id,
                    "payment_intent_id": payment_intent_id,
                    "customer_id": customer_id,
                    "client_secret": client_secret,
                },
            )
        )
        if self.pay_error:
            raise self.pay_error
        return self.secret


class RecordingCommitter:
    def __init__(self, error=None, result="booking-1"):
        self.error = error
        self.result = result
        self.calls = []

    def __call__(self, order, intent):
        self.calls.append((order, intent))
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def order():
    return CheckoutOrder(
        name="A",
        email="a@x.com",
        amount=100,
        start_date=date(2026, 10, 20),
        end_date=date(2026, 10, 23),
    )


def run(gateway, committer, order, selection=PaymentMethodSelected("pm_card")):
    return CheckoutBridge(gateway, committer, today=TODAY).run(order, selection)


def test_successful_checkout_runs_steps_in_order(order):
    gateway = RecordingGateway()
    committer = RecordingCommitter()

    result = run(gateway, committer, order)

    assert result.succeeded
    assert result.booking == "booking-1"
    assert isinstance(result.state, Done)
    assert result.state.confirmation_secret == "sec_1"
    assert [name for name, _ in gateway.calls] == ["create", "pay"]
    assert gateway.calls[0][1] == {"name": "A", "email": "a@x.com", "amount": 100}
    assert gateway.calls[1][1] == {
        "payment_method_id": "pm_card",
        "payment_intent_id": "pi_1",
        "customer_id": "cus_1",
        "client_secret": "pi_1_secret_abc",
    }
    assert committer.calls == [(order, gateway.intent)]


@pytest.mark.parametrize("secret", ["", None])
def test_no_booking_without_confirmation_secret(order, secret):
    gateway = RecordingGateway(secret=secret)
    committer = RecordingCommitter()

    result = run(gateway, committer, order)

    assert not result.succeeded
    assert result.failure.code == PAYMENT_FAILED
    assert result.failure.payment_confirmed is False
    assert committer.calls == []


def test_missing_intent_secret_skips_confirmation(order):
    gateway = RecordingGateway(intent=IntentTicket(intent_id="pi_1", client_secret="", customer_id="cus_1"))
    committer = RecordingCommitter()

    result = run(gateway, committer, order)

    assert result.failure.code == PAYMENT_FAILED
    assert [name for name, _ in gateway.calls] == ["create"]
    assert committer.calls == []


def test_commit_failure_after_confirmation_reports_failure(order):
    gateway = RecordingGateway()
    committer = RecordingCommitter(error=PersistenceError("Could not create booking."))

    result = run(gateway, committer, order)

    assert not result.succeeded
    assert result.booking is None
    assert result.failure.code == BOOKING_FAILED
    assert result.failure.payment_confirmed is True
    assert [name for name, _ in gateway.calls] == ["create", "pay"]


def test_falsy_commit_result_is_a_booking_failure(order):
    result = run(RecordingGateway(), RecordingCommitter(result=None), order)

    assert result.failure.code == BOOKING_FAILED
    assert result.failure.payment_confirmed is True


def test_unexpected_commit_exception_is_converted(order):
    result = run(RecordingGateway(), RecordingCommitter(error=RuntimeError("boom")), order)

    assert result.failure.code == BOOKING_FAILED
    assert result.failure.message == "boom"


def test_cancel_makes_no_calls(order):
    gateway = RecordingGateway()
    committer = RecordingCommitter()

    result = run(gateway, committer, order, SheetCanceled())

    assert result.canceled
    assert isinstance(result.state, Canceled)
    assert result.failure is None
    assert gateway.calls == []
    assert committer.calls == []


def test_upstream_failure_while_resolving(order):
    gateway = RecordingGateway(create_error=UpstreamError("Stripe unavailable"))
    committer = RecordingCommitter()

    result = run(gateway, committer, order)

    assert result.failure.code == PAYMENT_FAILED
    assert result.failure.message == "Stripe unavailable"
    assert [name for name, _ in gateway.calls] == ["create"]
    assert committer.calls == []


def test_validation_failure_from_backend(order):
    gateway = RecordingGateway(create_error=ValidationError("Missing required fields."))

    result = run(gateway, RecordingCommitter(), order)

    assert result.failure.code == VALIDATION_ERROR


def test_pay_failure_never_commits(order):
    gateway = RecordingGateway(pay_error=UpstreamError("card declined"))
    committer = RecordingCommitter()

    result = run(gateway, committer, order)

    assert result.failure.code == PAYMENT_FAILED
    assert committer.calls == []


@pytest.mark.parametrize(
    "start,end",
    [
        (date(2026, 10, 18), date(2026, 10, 20)),
        (date(2026, 10, 22), date(2026, 10, 21)),
        (date(2026, 10, 22), date(2026, 10, 22)),
        (None, date(2026, 10, 22)),
    ],
)
def test_invalid_dates_fail_before_any_call(start, end):
    gateway = RecordingGateway()
    order = CheckoutOrder(name="A", email="a@x.com", amount=100, start_date=start, end_date=end)

    result = run(gateway, RecordingCommitter(), order)

    assert result.failure.code == VALIDATION_ERROR
    assert gateway.calls == []


def test_missing_payment_method_fails(order):
    gateway = RecordingGateway()

    result = run(gateway, RecordingCommitter(), order, PaymentMethodSelected(""))

    assert result.failure.code == VALIDATION_ERROR
    assert gateway.calls == []


def test_committing_state_requires_secret(order):
    confirming = Confirming(
        order=order,
        payment_method_id="pm_card",
        intent=IntentTicket(intent_id="pi_1", client_secret="pi_1_secret_abc", customer_id="cus_1"),
    )

    assert isinstance(confirming.confirmed("sec_1"), Committing)
    with pytest.raises(ValueError):
        confirming.confirmed("")


def test_sheet_configuration_uses_minor_units(settings):
    settings.PAYMENT_CURRENCY = "bgn"
    settings.MERCHANT_DISPLAY_NAME = "RealEstate, Inc."
    settings.PAYMENT_RETURN_URL = "realestate://"

    assert build_sheet_configuration(100) == {
        "merchantDisplayName": "RealEstate, Inc.",
        "intentConfiguration": {"mode": {"amount": 10000, "currencyCode": "bgn"}},
        "returnURL": "realestate://",
    }


def test_confirmed_payment_with_unrecorded_status_is_a_booking_failure(order):
    gateway = RecordingGateway(
        pay_error=PersistenceError("Could not record the payment confirmation.", payment_confirmed=True)
    )
    committer = RecordingCommitter()

    result = run(gateway, committer, order)

    assert result.failure.code == BOOKING_FAILED
    assert result.failure.payment_confirmed is True
    assert committer.calls == []


def test_iso_string_dates_are_parsed_before_commit():
    gateway = RecordingGateway()
    committer = RecordingCommitter()
    order = CheckoutOrder(name="A", email="a@x.com", amount=100, start_date="2026-10-20", end_date="2026-10-23")

    result = run(gateway, committer, order)

    assert result.succeeded
    committed_order, _ = committer.calls[0]
    assert (committed_order.start_date, committed_order.end_date) == (date(2026, 10, 20), date(2026, 10, 23))


@pytest.mark.parametrize("start", ["20/10/2026", "2026-02-30", 20261020])
def test_malformed_dates_fail_without_raising(start):
    gateway = RecordingGateway()
    order = CheckoutOrder(name="A", email="a@x.com", amount=100, start_date=start, end_date="2026-10-23")

    result = run(gateway, RecordingCommitter(), order)

    assert result.failure.code == VALIDATION_ERROR
    assert gateway.calls == []
