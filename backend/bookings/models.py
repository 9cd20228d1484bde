import builtins

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Booking(models.Model):
    """Reservation of a property for a date range, only ever written after payment confirmation."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings")
    property = models.ForeignKey("properties.Property", on_delete=models.PROTECT, related_name="bookings")
    amount = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    start_date = models.DateField()
    end_date = models.DateField()
    payment = models.OneToOneField(
        "payments.Payment",
        on_delete=models.PROTECT,
        related_name="booking",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "id"]

    def __str__(self):
        return f"{self.property} {self.start_date:%Y-%m-%d} → {self.end_date:%Y-%m-%d}"

    @builtins.property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days
