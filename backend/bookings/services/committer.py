from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as ModelValidationError
from django.db import DatabaseError, transaction

from bookings.models import Booking
from payments.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def commit_booking(
    *,
    user,
    amount: int,
    start_date,
    end_date,
    created_at,
    property,
    payment=None,
) -> Booking:
    """
    Persist a booking once payment confirmation has been observed.

    Date ordering is the caller's responsibility. Any rejection by the store is
    raised as `PersistenceError` and leaves nothing behind.
    """

    booking = Booking(
        user=user,
        property=property,
        amount=amount,
        start_date=start_date,
        end_date=end_date,
        created_at=created_at,
        payment=payment,
    )
    try:
        with transaction.atomic():
            booking.full_clean()
            booking.save()
    except (DatabaseError, ModelValidationError) as exc:
        logger.exception(
            "Could not persist booking for user %s on property %s",
            getattr(user, "pk", None),
            getattr(property, "pk", None),
        )
        raise PersistenceError("Could not create booking.") from exc

    logger.info("Booking %s committed for property %s", booking.pk, property.pk)
    return booking
