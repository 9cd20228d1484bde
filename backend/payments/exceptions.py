class CheckoutError(Exception):
    """Base class for failures in the customer → intent → booking sequence."""

    code = "checkout_error"

    def __init__(self, message: str = "", *, code: str | None = None, payment_confirmed: bool = False):
        super().__init__(message)
        self.message = message
        self.payment_confirmed = payment_confirmed
        if code is not None:
            self.code = code


class ValidationError(CheckoutError):
    """Missing or malformed request fields; surfaced as a 4xx."""

    code = "validation_error"


class UpstreamError(CheckoutError):
    """Stripe (or the backend, seen from a client) rejected or failed a call."""

    code = "upstream_error"


class PersistenceError(CheckoutError):
    """The payment or booking store rejected the write."""

    code = "persistence_error"
