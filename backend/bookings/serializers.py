from rest_framework import serializers

from bookings.models import Booking


class BookingSerializer(serializers.ModelSerializer):
    property_name = serializers.CharField(source="property.name", read_only=True)
    nights = serializers.IntegerField(read_only=True)
    payment_intent = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "property",
            "property_name",
            "amount",
            "start_date",
            "end_date",
            "nights",
            "payment_intent",
            "created_at",
        ]
        read_only_fields = fields

    def get_payment_intent(self, obj: Booking) -> str | None:
        if obj.payment is None:
            return None
        return obj.payment.stripe_payment_intent


class CheckoutRequestSerializer(serializers.Serializer):
    """Payment sheet outcome submitted by the client; dates are checked by the checkout itself."""

    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    payment_method_id = serializers.CharField(required=False, allow_blank=True, default="")
    canceled = serializers.BooleanField(required=False, default=False)
