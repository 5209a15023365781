"""Tests for the DirectorDealing model."""
import dataclasses
import json
from decimal import Decimal

import pytest

from dealings_ingest.models import DirectorDealing


@pytest.fixture
def dealing():
    return DirectorDealing(
        stock_code="SSW",
        date="01 Jan 2024",
        beneficiary="J. Smith",
        deal_type="Purchase",
        value=10000,
        volume=500,
        price=Decimal("20.00"),
    )


def test_to_json_uses_wire_field_names(dealing):
    assert dealing.to_json() == (
        '{"stock_code":"SSW","date":"01 Jan 2024","Beneficiary":"J. Smith",'
        '"deal_type":"Purchase","value":10000,"volume":500,"price":20.0}'
    )


def test_serialization_is_repeatable(dealing):
    assert dealing.to_json() == dealing.to_json()
    assert json.loads(dealing.to_json())["price"] == 20.0


def test_records_are_immutable(dealing):
    with pytest.raises(dataclasses.FrozenInstanceError):
        dealing.value = 1


def test_missing_fields_are_reported():
    partial = DirectorDealing(stock_code="SSW", price=Decimal("1"), date="01 Jan 2024")

    assert not partial.is_complete
    assert partial.missing_fields == ("deal_type", "value", "volume")
    assert partial.to_dict()["value"] is None


def test_complete_record(dealing):
    assert dealing.is_complete
    assert dealing.missing_fields == ()


def test_fields_follow_wire_order_and_require_keywords():
    assert tuple(f.name for f in dataclasses.fields(DirectorDealing)) == (
        "stock_code",
        "date",
        "beneficiary",
        "deal_type",
        "value",
        "volume",
        "price",
    )
    with pytest.raises(TypeError):
        DirectorDealing("SSW", "01 Jan 2024")


def test_price_is_required():
    with pytest.raises(TypeError):
        DirectorDealing(stock_code="SSW")
