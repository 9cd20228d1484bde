import types

import pytest

from accounts.models import User
from payments.exceptions import UpstreamError
from properties.models import Property


class FakeProcessor:
    """In-memory stand-in for the Stripe processor that records every call."""

    def __init__(self):
        self.customers: dict[str, list] = {}
        self.calls: list[tuple[str, dict]] = []
        self.fail_on: set[str] = set()
        self.confirm_status = "succeeded"
        self.confirm_secret: str | None = None
        self._intents = 0

    def _record(self, call, /, **kwargs):
        self.calls.append((call, kwargs))
        if call in self.fail_on:
            raise UpstreamError(f"{call} failed")

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def list_customers(self, email):
        self._record("list_customers", email=email)
        return list(self.customers.get(email, []))

    def create_customer(self, *, name, email):
        self._record("create_customer", name=name, email=email)
        count = sum(len(items) for items in self.customers.values())
        customer = types.SimpleNamespace(id=f"cus_{count + 1}", name=name, email=email)
        self.customers.setdefault(email, []).append(customer)
        return customer

    def create_ephemeral_key(self, customer_id):
        self._record("create_ephemeral_key", customer_id=customer_id)
        return types.SimpleNamespace(id="ephkey_1", secret="ek_test_1", expires=1700000000)

    def create_payment_intent(self, *, amount, currency, customer_id):
        self._record("create_payment_intent", amount=amount, currency=currency, customer_id=customer_id)
        self._intents += 1
        intent_id = f"pi_{self._intents}"
        return types.SimpleNamespace(
            id=intent_id,
            amount=amount,
            currency=currency,
            customer=customer_id,
            client_secret=f"{intent_id}_secret_abc",
            status="requires_payment_method",
        )

    def confirm_payment_intent(self, intent_id, *, payment_method_id):
        self._record("confirm_payment_intent", intent_id=intent_id, payment_method_id=payment_method_id)
        return types.SimpleNamespace(
            id=intent_id,
            client_secret=self.confirm_secret or f"{intent_id}_secret_confirmed",
            status=self.confirm_status,
        )


@pytest.fixture
def processor():
    return FakeProcessor()


@pytest.fixture
def renter(db):
    return User.objects.create_user(
        username="a@x.com",
        email="a@x.com",
        password="password123",
        display_name="A",
    )


@pytest.fixture
def listing(db):
    return Property.objects.create(
        name="Seaside Apartment",
        address="Primorski Blvd 12, Varna",
        price=100,
        rating="4.5",
        bedrooms=2,
        bathrooms=1,
        area=70,
    )
