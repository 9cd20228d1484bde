from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("property", "user", "start_date", "end_date", "amount", "created_at")
    list_filter = ("start_date",)
    search_fields = ("property__name", "user__email", "payment__stripe_payment_intent")
    raw_id_fields = ("payment",)
