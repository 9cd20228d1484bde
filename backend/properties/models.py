from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Property(models.Model):
    """A rental listing. `price` is in major currency units for the whole stay."""

    name = models.CharField(max_length=200)
    address = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    bedrooms = models.PositiveSmallIntegerField(default=1)
    bathrooms = models.PositiveSmallIntegerField(default=1)
    area = models.PositiveIntegerField(help_text="Floor area in square metres.")
    image = models.URLField(blank=True)
    agent = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="listed_properties",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]
        verbose_name_plural = "properties"

    def __str__(self):
        return self.name

    @property
    def price_minor_units(self) -> int:
        return self.price * 100
