from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("stripe_payment_intent", "stripe_customer", "amount_cents", "currency", "status", "created_at")
    list_filter = ("status", "currency")
    search_fields = ("stripe_payment_intent", "stripe_customer")
    readonly_fields = ("amount_cents", "currency", "created_at", "updated_at")
