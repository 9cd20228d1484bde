from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    display_name = models.CharField(max_length=120, blank=True)

    @property
    def name(self) -> str:
        """Name shown on the payment sheet and sent to Stripe."""
        full_name = f"{self.first_name} {self.last_name}".strip()
        return self.display_name or full_name or self.email
