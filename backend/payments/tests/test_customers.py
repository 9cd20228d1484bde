import types

import pytest

from payments.exceptions import UpstreamError, ValidationError
from payments.services.customers import resolve_customer


def test_resolving_same_email_twice_returns_same_customer(processor):
    first = resolve_customer(processor, email="a@x.com", name="A")
    second = resolve_customer(processor, email="a@x.com", name="A")

    assert first == second == "cus_1"
    assert processor.call_names.count("create_customer") == 1


def test_existing_customer_first_match_wins(processor):
    processor.customers["a@x.com"] = [
        types.SimpleNamespace(id="cus_old", email="a@x.com"),
        types.SimpleNamespace(id="cus_dup", email="a@x.com"),
    ]

    assert resolve_customer(processor, email="a@x.com", name="A") == "cus_old"
    assert "create_customer" not in processor.call_names


def test_email_is_stripped_before_lookup(processor):
    resolve_customer(processor, email="  a@x.com ", name="A")
    assert processor.calls[0] == ("list_customers", {"email": "a@x.com"})


@pytest.mark.parametrize("email,name", [("", "A"), ("a@x.com", ""), (None, "A"), ("a@x.com", "   ")])
def test_missing_email_or_name_is_rejected(processor, email, name):
    with pytest.raises(ValidationError):
        resolve_customer(processor, email=email, name=name)
    assert processor.calls == []


def test_upstream_failure_propagates(processor):
    processor.fail_on.add("create_customer")

    with pytest.raises(UpstreamError):
        resolve_customer(processor, email="a@x.com", name="A")
