from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import User
from properties.models import Property


SEED_PASSWORD = "RealEstate123!"

SAMPLE_PROPERTIES = [
    {
        "name": "Seaside Apartment",
        "address": "Primorski Blvd 12, Varna",
        "description": "Two-bedroom flat a short walk from the beach.",
        "price": 120,
        "rating": "4.6",
        "bedrooms": 2,
        "bathrooms": 1,
        "area": 70,
        "image": "https://images.unsplash.com/photo-1505691938895-1758d7feb511",
    },
    {
        "name": "Pirin Mountain Chalet",
        "address": "Pirin St 3, Bansko",
        "description": "Wood-panelled chalet next to the gondola.",
        "price": 300,
        "rating": "4.9",
        "bedrooms": 4,
        "bathrooms": 2,
        "area": 160,
        "image": "https://images.unsplash.com/photo-1518780664697-55e3ad937233",
    },
    {
        "name": "Old Town Studio",
        "address": "Saborna St 7, Plovdiv",
        "description": "Compact studio in the old town.",
        "price": 60,
        "rating": "4.2",
        "bedrooms": 1,
        "bathrooms": 1,
        "area": 32,
        "image": "https://images.unsplash.com/photo-1522708323590-d24dbb6b0267",
    },
]


class Command(BaseCommand):
    help = "Populate the local development database with sample listings and accounts."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            self.stdout.write(self.style.MIGRATE_HEADING("Creating users"))
            agent = self._ensure_user(
                email="agent@realestate.test",
                first_name="Ani",
                last_name="Agent",
            )
            self._ensure_user(
                email="renter@realestate.test",
                first_name="Rado",
                last_name="Renter",
            )

            self.stdout.write(self.style.MIGRATE_HEADING("Creating properties"))
            for data in SAMPLE_PROPERTIES:
                listing, created = Property.objects.update_or_create(
                    name=data["name"],
                    defaults={**data, "agent": agent},
                )
                verb = "Created" if created else "Updated"
                self.stdout.write(f"  {verb} {listing.name} ({listing.price} {settings.PAYMENT_CURRENCY})")

        self.stdout.write(self.style.SUCCESS("Development seed data created."))
        self.stdout.write(self.style.NOTICE(f"Sample login accounts use password: {SEED_PASSWORD}"))

    def _ensure_user(self, email: str, first_name: str, last_name: str) -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={
                "username": email,
                "first_name": first_name,
                "last_name": last_name,
                "display_name": f"{first_name} {last_name}",
            },
        )
        if created:
            user.set_password(SEED_PASSWORD)
            user.save()
            self.stdout.write(f"  Created {email}")
        return user
