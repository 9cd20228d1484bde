from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("stripe_payment_intent", models.CharField(max_length=200, unique=True)),
                ("stripe_customer", models.CharField(max_length=200)),
                ("amount_cents", models.PositiveIntegerField()),
                ("currency", models.CharField(max_length=10)),
                ("status", models.CharField(max_length=30)),
                ("payment_method", models.CharField(blank=True, max_length=200)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
