"""
Parcel planning for shipping quotes.

Turns cart lines plus the product/variant shipping metadata from Sanity into
one parcel per unit of quantity, and decides whether the order needs freight.
There is no bin packing: ten units are ten parcels.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from storefront.core.enums import ShippingClass
from storefront.schemas.shipping import CartItemInput, PackageDimensions, PackageSpec, PackageWeight

MIN_PACKAGE_WEIGHT_LB = 0.1
MAX_PACKAGES = 500

_DIMENSION_JUNK = re.compile(r"[^0-9xX.]")


def to_positive_number(value: Any, fallback: float = 0.0) -> float:
    """`value` as a float when it is a finite positive number, else `fallback`"""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    if math.isfinite(number) and number > 0:
        return number
    return fallback


def parse_dimensions(value: Any) -> Optional[Dict[str, float]]:
    """
    Parse a box-dimension string into length/width/height inches

    Examples:
        "10x8x4"        -> {"length": 10, "width": 8, "height": 4}
        "24 x 12 x 6 in" -> {"length": 24, "width": 12, "height": 6}
        "12x9"          -> None
    """
    if not value:
        return None
    cleaned = _DIMENSION_JUNK.sub("", str(value)).lower()
    parts = []
    for raw in cleaned.split("x"):
        try:
            parts.append(float(raw))
        except ValueError:
            return None
    if len(parts) < 3 or not all(math.isfinite(n) and n > 0 for n in parts):
        return None
    length, width, height = parts[:3]
    return {"length": length, "width": width, "height": height}


def find_product_data(products: Sequence[Dict[str, Any]], cart_id: str) -> Tuple[Optional[Dict], Optional[Dict]]:
    """(product, variant) for a cart id; the variant is None for a product-level match"""
    for product in products:
        if product.get("_id") == cart_id:
            return product, None
        for variant in product.get("variants") or []:
            if not variant:
                continue
            if cart_id in (variant.get("_id"), variant.get("id"), variant.get("_key")):
                return product, variant
    return None, None


@dataclass
class PackagePlan:
    packages: List[PackageSpec] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    total_weight: float = 0.0
    max_dimension: float = 0.0
    freight: bool = False
    install_only_lines: int = 0

    @property
    def install_only(self) -> bool:
        """Every line is install-only, so nothing needs to ship"""
        return not self.packages and self.install_only_lines > 0


def _pick(key: str, *sources: Optional[Dict]) -> Any:
    for source in sources:
        if source and source.get(key) not in (None, ""):
            return source.get(key)
    return None


def build_package_plan(
    cart: Sequence[CartItemInput],
    products: Sequence[Dict[str, Any]],
    default_dimensions: Dict[str, float],
    default_weight: float,
    freight_weight: float = 150.0,
    freight_dimension: float = 60.0,
) -> PackagePlan:
    """
    Build parcels for every cart line and flag freight

    Variant metadata wins over product metadata, which wins over the defaults.
    Lines with no matching product are reported in `missing` and still ship
    in a default parcel.
    """
    plan = PackagePlan()

    for item in cart:
        cart_id = str(item.id)
        product, variant = find_product_data(products, cart_id)

        if product is None:
            plan.missing.append(cart_id)

        shipping_class = ShippingClass.normalize(_pick("shippingClass", variant, product))
        if shipping_class == ShippingClass.FREIGHT.value:
            plan.freight = True
        if shipping_class == ShippingClass.INSTALL_ONLY.value:
            plan.install_only_lines += 1
            continue

        dims = parse_dimensions(_pick("boxDimensions", variant, product)) or dict(default_dimensions)
        weight = max(
            MIN_PACKAGE_WEIGHT_LB,
            to_positive_number(_pick("shippingWeight", variant, product), default_weight),
        )
        sku = _pick("sku", variant, product) or cart_id
        title = _pick("title", variant, product)

        plan.max_dimension = max(plan.max_dimension, dims["length"], dims["width"], dims["height"])
        plan.total_weight += weight * item.quantity

        package = PackageSpec(
            weight=PackageWeight(value=weight),
            dimensions=PackageDimensions(**dims),
            sku=str(sku),
            title=title,
        )
        # Ships-alone or not, every unit gets its own parcel
        plan.packages.extend([package] * item.quantity)

    if plan.total_weight >= freight_weight or plan.max_dimension >= freight_dimension:
        plan.freight = True

    return plan
