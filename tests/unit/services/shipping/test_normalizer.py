# Rate normalization unit tests
import math

from storefront.services.shipping.normalizer import extract_raw_rates, normalize_rate, normalize_rates


def test_extract_raw_rates_shapes():
    rate = {"amount": 1}
    assert extract_raw_rates([rate, "junk"]) == [rate]
    assert extract_raw_rates({"rate_response": {"rates": [rate]}}) == [rate]
    assert extract_raw_rates({"rates": [rate]}) == [rate]
    assert extract_raw_rates(None) == []


def test_normalize_rate_shipengine_fields():
    rate = normalize_rate({
        "carrier_id": "se-1",
        "carrier_friendly_name": "UPS",
        "carrier": "ups",
        "service_code": "ups_ground",
        "service_type": "UPS Ground",
        "shipping_amount": {"currency": "usd", "amount": "18.40"},
        "delivery_days": "4",
        "estimated_delivery_date": "2026-10-23T00:00:00Z",
    })

    assert rate.carrier_id == "se-1"
    assert rate.carrier == "UPS"
    assert rate.service == "UPS Ground"
    assert rate.service_code == "ups_ground"
    assert rate.amount == 18.4
    assert rate.currency == "USD"
    assert rate.delivery_days == 4
    assert rate.estimated_delivery_date == "2026-10-23T00:00:00Z"


def test_normalize_rate_fallback_fields():
    rate = normalize_rate({"carrier": "DHL", "serviceCode": "express", "amount": 30, "deliveryDays": 1})

    assert rate.carrier == "DHL"
    assert rate.service == "express"
    assert rate.amount == 30.0
    assert rate.currency == "USD"
    assert rate.delivery_days == 1


def test_normalize_rate_bad_amount_is_nan():
    rate = normalize_rate({"shipping_amount": {"amount": "call us"}})
    assert math.isnan(rate.amount)


def test_normalize_rates_sorts_and_filters(shipengine_rates_response):
    rates = normalize_rates(shipengine_rates_response)

    assert [r.amount for r in rates] == [12.5, 18.4]
    assert rates[0].carrier == "USPS"
    assert isinstance(rates, tuple)


def test_normalize_rates_drops_negative_amounts():
    rates = normalize_rates([{"amount": -1}, {"amount": 0}, {"amount": 5}])
    assert [r.amount for r in rates] == [0.0, 5.0]
