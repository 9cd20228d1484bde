from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import DatabaseError

from payments.exceptions import PersistenceError, ValidationError
from payments.models import Payment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedIntent:
    intent_id: str
    client_secret: str
    amount_cents: int
    currency: str
    customer_id: str
    status: str
    ephemeral_key: dict


@dataclass(frozen=True)
class ConfirmedIntent:
    intent_id: str
    client_secret: str
    status: str


def to_minor_units(amount) -> int:
    """Convert a whole major-unit amount (int or numeric string) to minor units."""
    if isinstance(amount, bool):
        raise ValidationError("Amount must be a whole number.")
    if isinstance(amount, str):
        amount = amount.strip()
        if not amount.isdigit():
            raise ValidationError("Amount must be a whole number.")
        amount = int(amount)
    elif isinstance(amount, float):
        if not amount.is_integer():
            raise ValidationError("Amount must be a whole number.")
        amount = int(amount)
    elif not isinstance(amount, int):
        raise ValidationError("Amount must be a whole number.")

    if amount <= 0:
        raise ValidationError("Amount must be positive.")
    return amount * 100


def create_intent(processor, *, amount, currency: str, customer_id: str) -> IssuedIntent:
    """
    Create a payment intent for `amount` major units, plus an ephemeral key
    scoped to the customer for the payment sheet session.

    Redirect-based payment methods are disabled because the mobile sheet cannot
    return from them. A `Payment` row mirrors the intent from this point on.
    """

    if not customer_id:
        raise ValidationError("A resolved customer is required before creating an intent.")
    if not currency:
        raise ValidationError("Currency is not configured.")
    amount_cents = to_minor_units(amount)

    ephemeral_key = processor.create_ephemeral_key(customer_id)
    intent = processor.create_payment_intent(
        amount=amount_cents,
        currency=currency,
        customer_id=customer_id,
    )

    try:
        Payment.objects.create(
            stripe_payment_intent=intent.id,
            stripe_customer=customer_id,
            amount_cents=amount_cents,
            currency=currency,
            status=intent.status,
        )
    except DatabaseError as exc:
        logger.exception("Could not record payment intent %s", intent.id)
        raise PersistenceError("Could not record payment intent.") from exc
    logger.info(
        "Created payment intent %s for customer %s (%s %s)",
        intent.id,
        customer_id,
        amount_cents,
        currency,
    )
    return IssuedIntent(
        intent_id=intent.id,
        client_secret=intent.client_secret,
        amount_cents=amount_cents,
        currency=currency,
        customer_id=customer_id,
        status=intent.status,
        ephemeral_key={
            "id": ephemeral_key.id,
            "secret": ephemeral_key.secret,
            "expires": getattr(ephemeral_key, "expires", None),
        },
    )


def confirm_intent(
    processor,
    *,
    payment_intent_id: str,
    payment_method_id: str,
    customer_id: str | None = None,
) -> ConfirmedIntent:
    """
    Confirm an intent with the selected payment method.

    The returned `client_secret` is empty unless Stripe reports the intent as
    confirmed, so callers can gate the booking on its truthiness.
    """

    if not payment_intent_id or not payment_method_id:
        raise ValidationError("Payment intent and payment method are required.")

    payment = Payment.objects.filter(stripe_payment_intent=payment_intent_id).first()
    if payment and customer_id and payment.stripe_customer != customer_id:
        raise ValidationError("Payment intent does not belong to this customer.")

    intent = processor.confirm_payment_intent(payment_intent_id, payment_method_id=payment_method_id)
    status = intent.status or ""

    confirmed = status in Payment.CONFIRMED_STATUSES
    if payment:
        payment.status = status
        payment.payment_method = payment_method_id
        try:
            payment.save(update_fields=["status", "payment_method", "updated_at"])
        except DatabaseError as exc:
            logger.exception("Could not record status %s for payment intent %s", status, payment_intent_id)
            raise PersistenceError(
                "Could not record the payment confirmation.",
                payment_confirmed=confirmed,
            ) from exc

    if not confirmed:
        logger.warning("Payment intent %s not confirmed (status=%s)", payment_intent_id, status)
        return ConfirmedIntent(intent_id=payment_intent_id, client_secret="", status=status)

    return ConfirmedIntent(
        intent_id=payment_intent_id,
        client_secret=intent.client_secret or "",
        status=status,
    )
