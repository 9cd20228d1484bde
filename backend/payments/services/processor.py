from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

import stripe
from django.conf import settings

from payments.exceptions import UpstreamError

logger = logging.getLogger(__name__)

AUTOMATIC_PAYMENT_METHODS = {"enabled": True, "allow_redirects": "never"}


class StripePaymentProcessor:
    """
    Thin wrapper over the Stripe resources the checkout needs.

    Instances are built explicitly (see `get_payment_processor`) and passed into
    the services, so nothing depends on a module-level `stripe.api_key`.
    Every Stripe failure is re-raised as `UpstreamError`.
    """

    def __init__(self, *, api_key: str, api_version: str):
        if not api_key:
            raise RuntimeError("Stripe secret key is not configured.")
        self.api_key = api_key
        self.api_version = api_version

    def _call(self, description: str, func, *args, **kwargs):
        try:
            return func(*args, api_key=self.api_key, **kwargs)
        except stripe.error.StripeError as exc:
            logger.exception("Stripe call failed (%s): %s", description, exc)
            message = getattr(exc, "user_message", None) or str(exc) or description
            raise UpstreamError(message) from exc

    def list_customers(self, email: str) -> list:
        result = self._call("list customers", stripe.Customer.list, email=email, limit=1)
        return list(result.data)

    def create_customer(self, *, name: str, email: str):
        return self._call("create customer", stripe.Customer.create, name=name, email=email)

    def create_ephemeral_key(self, customer_id: str):
        return self._call(
            "create ephemeral key",
            stripe.EphemeralKey.create,
            customer=customer_id,
            stripe_version=self.api_version,
        )

    def create_payment_intent(self, *, amount: int, currency: str, customer_id: str):
        return self._call(
            "create payment intent",
            stripe.PaymentIntent.create,
            amount=amount,
            currency=currency,
            customer=customer_id,
            automatic_payment_methods=AUTOMATIC_PAYMENT_METHODS,
        )

    def confirm_payment_intent(self, intent_id: str, *, payment_method_id: str):
        return self._call(
            "confirm payment intent",
            stripe.PaymentIntent.confirm,
            intent_id,
            payment_method=payment_method_id,
        )


@dataclass
class StubCustomer:
    id: str
    email: str
    name: str


@dataclass
class StubEphemeralKey:
    id: str
    secret: str
    expires: int = 0


@dataclass
class StubPaymentIntent:
    id: str
    amount: int
    currency: str
    customer: str
    client_secret: str
    status: str = "requires_payment_method"
    payment_method: Optional[str] = None


class StubPaymentProcessor:
    """
    Local stand-in for Stripe used in development when no secret key is set.

    Customer ids are derived from the email so repeated lookups resolve to the
    same customer without keeping state between requests.
    """

    def list_customers(self, email: str) -> list:
        return []

    def create_customer(self, *, name: str, email: str) -> StubCustomer:
        logger.warning("Stripe stub in use: creating local customer for %s", email)
        digest = hashlib.sha256(email.lower().encode("utf-8")).hexdigest()[:14]
        return StubCustomer(id=f"cus_test_{digest}", email=email, name=name)

    def create_ephemeral_key(self, customer_id: str) -> StubEphemeralKey:
        return StubEphemeralKey(id=f"ephkey_test_{uuid4().hex}", secret=f"ek_test_{uuid4().hex}")

    def create_payment_intent(self, *, amount: int, currency: str, customer_id: str) -> StubPaymentIntent:
        intent_id = f"pi_test_{uuid4().hex}"
        return StubPaymentIntent(
            id=intent_id,
            amount=amount,
            currency=currency,
            customer=customer_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
        )

    def confirm_payment_intent(self, intent_id: str, *, payment_method_id: str) -> StubPaymentIntent:
        return StubPaymentIntent(
            id=intent_id,
            amount=0,
            currency=settings.PAYMENT_CURRENCY,
            customer="",
            client_secret=f"{intent_id}_secret_confirmed",
            status="succeeded",
            payment_method=payment_method_id,
        )


def _get_stripe_api_key() -> Optional[str]:
    key = getattr(settings, "STRIPE_SECRET_KEY", "")
    return key or None


def _should_use_stub() -> bool:
    if getattr(settings, "STRIPE_USE_STUB", False):
        return True
    return _get_stripe_api_key() is None


def get_payment_processor():
    """Build the processor configured for this deployment."""
    if _should_use_stub():
        return StubPaymentProcessor()
    return StripePaymentProcessor(
        api_key=_get_stripe_api_key(),
        api_version=settings.STRIPE_API_VERSION,
    )
