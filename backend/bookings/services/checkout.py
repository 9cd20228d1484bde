"""
Checkout confirmation flow.

A checkout moves through explicit states::

    Init ─┬─> Canceled
          └─> Resolving ─> Confirming ─> Committing ─> Done
                  │             │             │
                  └─────────────┴─────────────┴──> Failed

`Committing` can only be built from a non-empty confirmation secret, so a
booking is never written before Stripe has confirmed the intent. Every error
raised while running the flow ends in `Failed`; `CheckoutBridge.run` never
raises for a failed checkout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Callable, Optional, Union

from django.conf import settings

from bookings.services.dates import validate_date_range
from bookings.services.gateways import IntentTicket
from payments.exceptions import CheckoutError, ValidationError

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "validation_error"
PAYMENT_FAILED = "payment_failed"
BOOKING_FAILED = "booking_failed"


@dataclass(frozen=True)
class CheckoutOrder:
    name: str
    email: str
    amount: int
    start_date: Any
    end_date: Any


@dataclass(frozen=True)
class PaymentMethodSelected:
    payment_method_id: str


@dataclass(frozen=True)
class SheetCanceled:
    pass


SheetSelection = Union[PaymentMethodSelected, SheetCanceled]


@dataclass(frozen=True)
class CheckoutFailure:
    code: str
    message: str
    payment_confirmed: bool = False


@dataclass(frozen=True)
class Init:
    order: CheckoutOrder


@dataclass(frozen=True)
class Resolving:
    order: CheckoutOrder
    payment_method_id: str


@dataclass(frozen=True)
class Confirming:
    order: CheckoutOrder
    payment_method_id: str
    intent: IntentTicket

    def confirmed(self, confirmation_secret: str) -> "Committing":
        return Committing(order=self.order, intent=self.intent, confirmation_secret=confirmation_secret)


@dataclass(frozen=True)
class Committing:
    order: CheckoutOrder
    intent: IntentTicket
    confirmation_secret: str

    def __post_init__(self):
        if not self.confirmation_secret:
            raise ValueError("Cannot commit a booking without a confirmation secret.")


@dataclass(frozen=True)
class Done:
    intent: IntentTicket
    confirmation_secret: str
    booking: Any


@dataclass(frozen=True)
class Failed:
    failure: CheckoutFailure


@dataclass(frozen=True)
class Canceled:
    pass


CheckoutState = Union[Init, Resolving, Confirming, Committing, Done, Failed, Canceled]
TERMINAL_STATES = (Done, Failed, Canceled)


@dataclass(frozen=True)
class CheckoutResult:
    state: CheckoutState

    @property
    def succeeded(self) -> bool:
        return isinstance(self.state, Done)

    @property
    def canceled(self) -> bool:
        return isinstance(self.state, Canceled)

    @property
    def booking(self):
        return self.state.booking if isinstance(self.state, Done) else None

    @property
    def failure(self) -> Optional[CheckoutFailure]:
        return self.state.failure if isinstance(self.state, Failed) else None


# commit(order, intent) -> booking; raises on failure.
Committer = Callable[[CheckoutOrder, IntentTicket], Any]


class CheckoutBridge:
    """
    Drive one checkout attempt: resolve customer and intent through the
    gateway, confirm it, then commit the booking.

    Steps run strictly one after another. A booking commit failure after a
    confirmed payment is reported as `booking_failed` with
    `payment_confirmed=True`; no refund is attempted.
    """

    def __init__(self, gateway, commit: Committer, *, today: date | None = None):
        self.gateway = gateway
        self.commit = commit
        self.today = today

    def run(self, order: CheckoutOrder, selection: SheetSelection) -> CheckoutResult:
        state: CheckoutState = Init(order)
        state = self._start(state, selection)
        while not isinstance(state, TERMINAL_STATES):
            state = self._advance(state)
        logger.debug("Checkout finished in %s", type(state).__name__)
        return CheckoutResult(state)

    def _start(self, state: Init, selection: SheetSelection) -> CheckoutState:
        if isinstance(selection, SheetCanceled):
            logger.info("Payment sheet canceled by %s", state.order.email)
            return Canceled()
        if not isinstance(selection, PaymentMethodSelected):
            raise TypeError(f"Unknown sheet selection: {selection!r}")
        if not selection.payment_method_id:
            return Failed(CheckoutFailure(VALIDATION_ERROR, "A payment method is required."))
        return self._guarded(state, lambda init: self._validate(init, selection.payment_method_id))

    def _advance(self, state: CheckoutState) -> CheckoutState:
        logger.debug("Checkout entering %s", type(state).__name__)
        if isinstance(state, Resolving):
            return self._guarded(state, self._resolve)
        if isinstance(state, Confirming):
            return self._guarded(state, self._confirm)
        if isinstance(state, Committing):
            return self._guarded(state, self._commit)
        raise TypeError(f"Unhandled checkout state: {state!r}")

    def _guarded(self, state: CheckoutState, step: Callable[[Any], CheckoutState]) -> CheckoutState:
        try:
            return step(state)
        except CheckoutError as exc:
            return Failed(self._failure(state, exc.message, exc))
        except Exception as exc:  # the sheet must always get a terminal state back
            logger.exception("Unexpected error during checkout in %s", type(state).__name__)
            return Failed(self._failure(state, str(exc) or "Unexpected checkout error.", exc))

    def _validate(self, state: Init, payment_method_id: str) -> CheckoutState:
        start, end = validate_date_range(state.order.start_date, state.order.end_date, today=self.today)
        order = replace(state.order, start_date=start, end_date=end)
        return Resolving(order=order, payment_method_id=payment_method_id)

    def _resolve(self, state: Resolving) -> CheckoutState:
        order = state.order
        intent = self.gateway.create_intent(name=order.name, email=order.email, amount=order.amount)
        if not intent.client_secret:
            return Failed(CheckoutFailure(PAYMENT_FAILED, "The payment intent could not be created."))
        return Confirming(order=order, payment_method_id=state.payment_method_id, intent=intent)

    def _confirm(self, state: Confirming) -> CheckoutState:
        secret = self.gateway.pay(
            payment_method_id=state.payment_method_id,
            payment_intent_id=state.intent.intent_id,
            customer_id=state.intent.customer_id,
            client_secret=state.intent.client_secret,
        )
        if not secret:
            return Failed(CheckoutFailure(PAYMENT_FAILED, "Payment was not confirmed."))
        return state.confirmed(secret)

    def _commit(self, state: Committing) -> CheckoutState:
        booking = self.commit(state.order, state.intent)
        if not booking:
            return Failed(
                CheckoutFailure(BOOKING_FAILED, "Could not create booking.", payment_confirmed=True)
            )
        return Done(intent=state.intent, confirmation_secret=state.confirmation_secret, booking=booking)

    @staticmethod
    def _failure(state: CheckoutState, message: str, exc: Exception) -> CheckoutFailure:
        if isinstance(state, Committing) or getattr(exc, "payment_confirmed", False):
            intent = getattr(state, "intent", None)
            logger.error(
                "Payment %s confirmed but booking failed: %s",
                intent.intent_id if intent else "?",
                message,
            )
            return CheckoutFailure(BOOKING_FAILED, message, payment_confirmed=True)
        if isinstance(exc, ValidationError):
            return CheckoutFailure(VALIDATION_ERROR, message)
        return CheckoutFailure(PAYMENT_FAILED, message)


def build_sheet_configuration(amount: int) -> dict:
    """Deferred-intent configuration for the payment sheet (`amount` in major units)."""
    return {
        "merchantDisplayName": settings.MERCHANT_DISPLAY_NAME,
        "intentConfiguration": {
            "mode": {
                "amount": amount * 100,
                "currencyCode": settings.PAYMENT_CURRENCY,
            },
        },
        "returnURL": settings.PAYMENT_RETURN_URL,
    }
