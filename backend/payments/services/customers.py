from __future__ import annotations

import logging

from payments.exceptions import ValidationError

logger = logging.getLogger(__name__)


def resolve_customer(processor, *, email: str, name: str) -> str:
    """
    Return the Stripe customer id for `email`, creating the customer if absent.

    The first customer listed for the email wins; duplicates are not merged.
    Processor failures surface as `UpstreamError` and must abort the checkout.
    """

    email = (email or "").strip()
    name = (name or "").strip()
    if not email or not name:
        raise ValidationError("Customer email and name are required.")

    existing = processor.list_customers(email)
    if existing:
        return existing[0].id

    customer = processor.create_customer(name=name, email=email)
    logger.info("Created Stripe customer %s for %s", customer.id, email)
    return customer.id
