from django.db import models


class Payment(models.Model):
    """Local record of a Stripe payment intent, created before any booking exists."""

    CONFIRMED_STATUSES = {"succeeded", "processing", "requires_capture"}

    stripe_payment_intent = models.CharField(max_length=200, unique=True)
    stripe_customer = models.CharField(max_length=200)
    amount_cents = models.PositiveIntegerField()
    currency = models.CharField(max_length=10)
    status = models.CharField(max_length=30)
    payment_method = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.stripe_payment_intent} ({self.status})"

    @property
    def is_confirmed(self) -> bool:
        return self.status in self.CONFIRMED_STATUSES
