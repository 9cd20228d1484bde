import logging

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import CheckoutError, UpstreamError, ValidationError
from .services.customers import resolve_customer
from .services.intents import confirm_intent, create_intent
from .services.processor import get_payment_processor

logger = logging.getLogger(__name__)

MISSING_FIELDS = "Missing required fields."


def error_response(exc: CheckoutError) -> Response:
    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, UpstreamError):
        status_code = status.HTTP_502_BAD_GATEWAY
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    body = {"error": exc.message, "code": exc.code}
    if exc.payment_confirmed:
        body["payment_confirmed"] = True
    return Response(body, status=status_code)


def serialize_intent(issued) -> dict:
    return {
        "id": issued.intent_id,
        "client_secret": issued.client_secret,
        "amount": issued.amount_cents,
        "currency": issued.currency,
        "customer": issued.customer_id,
        "status": issued.status,
    }


class CreatePaymentIntentView(APIView):
    """
    Resolve the Stripe customer for the renter and issue a payment intent plus
    ephemeral key for the payment sheet.
    """

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        name = request.data.get("name")
        email = request.data.get("email")
        amount = request.data.get("amount")
        if not name or not email or not amount:
            return Response({"error": MISSING_FIELDS}, status=status.HTTP_400_BAD_REQUEST)

        try:
            processor = get_payment_processor()
        except RuntimeError as exc:
            logger.error("Payment processor unavailable: %s", exc)
            return Response(
                {"error": str(exc), "code": "configuration_error"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        try:
            customer_id = resolve_customer(processor, email=email, name=name)
            issued = create_intent(
                processor,
                amount=amount,
                currency=settings.PAYMENT_CURRENCY,
                customer_id=customer_id,
            )
        except CheckoutError as exc:
            return error_response(exc)

        return Response(
            {
                "paymentIntent": serialize_intent(issued),
                "ephermalKey": issued.ephemeral_key,
                "customer": customer_id,
            }
        )


class PayView(APIView):
    """Confirm a payment intent with the payment method chosen on the sheet."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        payment_method_id = request.data.get("payment_method_id")
        payment_intent_id = request.data.get("payment_intent_id")
        customer_id = request.data.get("customer_id")
        client_secret = request.data.get("client_secret")
        if not payment_method_id or not payment_intent_id:
            return Response({"error": MISSING_FIELDS}, status=status.HTTP_400_BAD_REQUEST)

        # Stripe client secrets are always prefixed with their intent id.
        if client_secret and not str(client_secret).startswith(f"{payment_intent_id}_secret_"):
            return Response(
                {"error": "Client secret does not match the payment intent.", "code": "validation_error"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            processor = get_payment_processor()
        except RuntimeError as exc:
            logger.error("Payment processor unavailable: %s", exc)
            return Response(
                {"error": str(exc), "code": "configuration_error"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        try:
            confirmed = confirm_intent(
                processor,
                payment_intent_id=payment_intent_id,
                payment_method_id=payment_method_id,
                customer_id=customer_id,
            )
        except CheckoutError as exc:
            return error_response(exc)

        return Response(
            {"result": {"client_secret": confirmed.client_secret, "status": confirmed.status}}
        )
