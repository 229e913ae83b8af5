# Parcel planning unit tests
import pytest

from storefront.schemas.shipping import CartItemInput
from storefront.services.shipping.packages import (
    MIN_PACKAGE_WEIGHT_LB,
    build_package_plan,
    find_product_data,
    parse_dimensions,
    to_positive_number,
)

DEFAULT_DIMS = {"length": 12.0, "width": 9.0, "height": 3.0}


def plan_for(cart, products, **kwargs):
    items = [CartItemInput.from_payload(line) for line in cart]
    return build_package_plan(items, products, default_dimensions=DEFAULT_DIMS, default_weight=2.0, **kwargs)


"""
1. Parsing helpers
"""

@pytest.mark.parametrize("raw,expected", [
    ("10x8x4", {"length": 10.0, "width": 8.0, "height": 4.0}),
    ("24 x 12 x 6 in", {"length": 24.0, "width": 12.0, "height": 6.0}),
    ("10.5X8X4", {"length": 10.5, "width": 8.0, "height": 4.0}),
])
def test_parse_dimensions_accepts_common_formats(raw, expected):
    assert parse_dimensions(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "12x9", "0x8x4", "axbxc"])
def test_parse_dimensions_rejects_incomplete_values(raw):
    assert parse_dimensions(raw) is None


def test_to_positive_number_falls_back():
    assert to_positive_number("5", 2.0) == 5.0
    assert to_positive_number(0, 2.0) == 2.0
    assert to_positive_number(-3, 2.0) == 2.0
    assert to_positive_number("heavy", 2.0) == 2.0
    assert to_positive_number(None, 2.0) == 2.0


def test_find_product_data_matches_variant_keys(sample_products):
    product, variant = find_product_data(sample_products, "var-2a")
    assert product["_id"] == "prod-2"
    assert variant["sku"] == "FAS-PUL-25"

    product, variant = find_product_data(sample_products, "sku-1")
    assert product["_id"] == "sku-1"
    assert variant is None

    assert find_product_data(sample_products, "nope") == (None, None)


"""
2. Package plans
"""

def test_one_package_per_unit(sample_products):
    plan = plan_for([{"id": "sku-1", "quantity": 2}], sample_products)

    assert len(plan.packages) == 2
    assert plan.freight is False
    assert plan.missing == []
    package = plan.packages[0]
    assert package.weight.value == 5.0
    assert package.weight.unit.value == "pound"
    assert (package.dimensions.length, package.dimensions.width, package.dimensions.height) == (10.0, 8.0, 4.0)
    assert package.dimensions.unit.value == "inch"
    assert package.sku == "FAS-ELB-1"
    assert plan.total_weight == 10.0


def test_variant_data_wins_over_product(sample_products):
    plan = plan_for([{"id": "var-2a", "quantity": 1}], sample_products)

    package = plan.packages[0]
    assert package.weight.value == 3.0
    # Variant has no box; the product's box is used
    assert package.dimensions.length == 14.0
    assert package.sku == "FAS-PUL-25"


def test_unknown_items_use_defaults_and_are_reported():
    plan = plan_for([{"id": "ghost", "quantity": 1}], [])

    assert plan.missing == ["ghost"]
    assert len(plan.packages) == 1
    package = plan.packages[0]
    assert package.weight.value == 2.0
    assert package.dimensions.length == 12.0
    assert package.sku == "ghost"


def test_weight_is_floored():
    products = [{"_id": "feather", "shippingWeight": 0.01}]
    plan = plan_for([{"id": "feather"}], products)
    assert plan.packages[0].weight.value == MIN_PACKAGE_WEIGHT_LB


def test_install_only_lines_produce_no_packages(sample_products):
    plan = plan_for([{"id": "var-2b", "quantity": 3}], sample_products)

    assert plan.packages == []
    assert plan.install_only is True


def test_mixed_install_only_cart_still_ships(sample_products):
    plan = plan_for([{"id": "var-2b"}, {"id": "sku-1"}], sample_products)

    assert len(plan.packages) == 1
    assert plan.install_only is False


"""
3. Freight detection
"""

def test_freight_at_weight_threshold():
    products = [{"_id": "engine", "shippingWeight": 75}]
    plan = plan_for([{"id": "engine", "quantity": 2}], products)
    assert plan.total_weight == 150.0
    assert plan.freight is True


def test_below_weight_threshold_is_not_freight():
    products = [{"_id": "engine", "shippingWeight": 74.9}]
    plan = plan_for([{"id": "engine", "quantity": 2}], products)
    assert plan.freight is False


def test_freight_at_dimension_threshold():
    products = [{"_id": "exhaust", "shippingWeight": 20, "boxDimensions": "60x10x10"}]
    plan = plan_for([{"id": "exhaust"}], products)
    assert plan.max_dimension == 60.0
    assert plan.freight is True


@pytest.mark.parametrize("shipping_class", ["freight", "Freight", " FREIGHT "])
def test_freight_shipping_class(shipping_class):
    products = [{"_id": "crate", "shippingWeight": 1, "shippingClass": shipping_class}]
    plan = plan_for([{"id": "crate"}], products)
    assert plan.freight is True


def test_custom_thresholds():
    products = [{"_id": "box", "shippingWeight": 40}]
    plan = plan_for([{"id": "box"}], products, freight_weight=40.0)
    assert plan.freight is True
