import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.models import Booking
from bookings.serializers import BookingSerializer, CheckoutRequestSerializer
from bookings.services.checkout import (
    BOOKING_FAILED,
    PAYMENT_FAILED,
    VALIDATION_ERROR,
    CheckoutBridge,
    CheckoutOrder,
    PaymentMethodSelected,
    SheetCanceled,
    build_sheet_configuration,
)
from bookings.services.committer import commit_booking
from bookings.services.gateways import LocalPaymentGateway
from payments.models import Payment
from payments.services.processor import get_payment_processor
from properties.models import Property

logger = logging.getLogger(__name__)

FAILURE_STATUS = {
    VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    PAYMENT_FAILED: status.HTTP_402_PAYMENT_REQUIRED,
    BOOKING_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class CheckoutView(APIView):
    """
    GET returns the payment sheet configuration for a property; POST submits
    the sheet outcome and runs the checkout through to a booking.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, property_id, *args, **kwargs):
        listing = get_object_or_404(Property, pk=property_id)
        return Response(build_sheet_configuration(listing.price))

    def post(self, request, property_id, *args, **kwargs):
        listing = get_object_or_404(Property, pk=property_id)
        serializer = CheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = request.user
        order = CheckoutOrder(
            name=user.name,
            email=user.email,
            amount=listing.price,
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
        )
        if data["canceled"]:
            selection = SheetCanceled()
        else:
            selection = PaymentMethodSelected(data["payment_method_id"])

        try:
            processor = get_payment_processor()
        except RuntimeError as exc:
            logger.error("Payment processor unavailable: %s", exc)
            return Response(
                {"status": "failed", "error": str(exc), "code": "configuration_error"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        def commit(checkout_order, intent):
            payment = Payment.objects.filter(stripe_payment_intent=intent.intent_id).first()
            return commit_booking(
                user=user,
                amount=checkout_order.amount,
                start_date=checkout_order.start_date,
                end_date=checkout_order.end_date,
                created_at=timezone.now(),
                property=listing,
                payment=payment,
            )

        bridge = CheckoutBridge(
            LocalPaymentGateway(processor, currency=settings.PAYMENT_CURRENCY),
            commit,
        )
        result = bridge.run(order, selection)

        if result.canceled:
            return Response({"status": "canceled"})
        if result.succeeded:
            return Response(
                {"status": "succeeded", "booking": BookingSerializer(result.booking).data},
                status=status.HTTP_201_CREATED,
            )

        failure = result.failure
        return Response(
            {
                "status": "failed",
                "code": failure.code,
                "error": failure.message,
                "payment_confirmed": failure.payment_confirmed,
            },
            status=FAILURE_STATUS.get(failure.code, status.HTTP_400_BAD_REQUEST),
        )


class BookingListView(generics.ListAPIView):
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Booking.objects.filter(user=self.request.user).select_related("property", "payment")
