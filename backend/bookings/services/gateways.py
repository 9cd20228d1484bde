from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from payments.exceptions import PersistenceError, UpstreamError, ValidationError
from payments.services.customers import resolve_customer
from payments.services.intents import confirm_intent, create_intent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntentTicket:
    """What the checkout learns from the backend after asking for an intent."""

    intent_id: str
    client_secret: str
    customer_id: str


class LocalPaymentGateway:
    """Runs the backend side of the checkout in-process."""

    def __init__(self, processor, *, currency: str):
        self.processor = processor
        self.currency = currency

    def create_intent(self, *, name: str, email: str, amount) -> IntentTicket:
        customer_id = resolve_customer(self.processor, email=email, name=name)
        issued = create_intent(
            self.processor,
            amount=amount,
            currency=self.currency,
            customer_id=customer_id,
        )
        return IntentTicket(
            intent_id=issued.intent_id,
            client_secret=issued.client_secret,
            customer_id=customer_id,
        )

    def pay(self, *, payment_method_id: str, payment_intent_id: str, customer_id: str, client_secret: str) -> str:
        confirmed = confirm_intent(
            self.processor,
            payment_intent_id=payment_intent_id,
            payment_method_id=payment_method_id,
            customer_id=customer_id,
        )
        return confirmed.client_secret


class HttpPaymentGateway:
    """
    Talks to a running backend over HTTP, the way the mobile client does.

    4xx answers become `ValidationError`; transport failures and 5xx answers
    become `UpstreamError`, except a 5xx flagged `payment_confirmed`, which
    becomes a confirmed `PersistenceError`. No timeout is applied unless one
    is given.
    """

    CREATE_PATH = "/api/stripe/create/"
    PAY_PATH = "/api/stripe/pay/"

    def __init__(self, base_url: str, *, session: requests.Session | None = None, timeout: float | None = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.exception("Backend request to %s failed", url)
            raise UpstreamError(f"Could not reach the payment backend: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = body.get("error") or f"Payment backend returned {response.status_code}."
            logger.warning("Backend %s answered %s: %s", path, response.status_code, message)
            if response.status_code < 500:
                raise ValidationError(message)
            if body.get("payment_confirmed"):
                raise PersistenceError(message, payment_confirmed=True)
            raise UpstreamError(message)
        return body

    def create_intent(self, *, name: str, email: str, amount) -> IntentTicket:
        body = self._post(self.CREATE_PATH, {"name": name, "email": email, "amount": amount})
        intent = body.get("paymentIntent") or {}
        return IntentTicket(
            intent_id=intent.get("id", ""),
            client_secret=intent.get("client_secret", ""),
            customer_id=body.get("customer", ""),
        )

    def pay(self, *, payment_method_id: str, payment_intent_id: str, customer_id: str, client_secret: str) -> str:
        body = self._post(
            self.PAY_PATH,
            {
                "payment_method_id": payment_method_id,
                "payment_intent_id": payment_intent_id,
                "customer_id": customer_id,
                "client_secret": client_secret,
            },
        )
        result = body.get("result") or {}
        return result.get("client_secret") or ""
