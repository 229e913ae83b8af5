"""
Cart and configured-price helpers.

Product pages post option selections (select, radio, checkbox, free text)
with a price delta each. This module turns them into a configured price,
a stable selection signature used as the cart line id, and the merged cart
the checkout works from. It also coerces loose cart payloads into the
order-cart items stored on Sanity order documents.
"""

import json
import logging
import re
import uuid
from typing import Any, Dict, Iterable, List, Optional

from storefront.core.utils import finite_number, normalize_price_delta
from storefront.schemas.cart import CartItem, OptionSelection, OrderCartItem

logger = logging.getLogger(__name__)

_NON_LETTERS = re.compile(r"[^a-z]")


def _as_selections(selections: Optional[Iterable[Any]]) -> List[OptionSelection]:
    return [OptionSelection.from_payload(s) for s in (selections or [])]


def configure_price(base_price: Any, selections: Optional[Iterable[Any]] = None) -> float:
    """Base price plus every selection's delta, never below zero"""
    base = finite_number(base_price) or 0.0
    extra = sum(s.price_delta for s in _as_selections(selections))
    return round(max(0.0, base + extra), 2)


def selection_signature(selections: Optional[Iterable[Any]]) -> str:
    """JSON of the selections ordered by `group:value`; identical configurations share it"""
    ordered = sorted(_as_selections(selections), key=lambda s: f"{s.group}:{s.value}")
    return json.dumps(
        [s.model_dump(by_alias=True, mode="json") for s in ordered],
        separators=(",", ":"),
    )


def cart_line_id(product_id: Optional[str], signature: str) -> str:
    return f"{product_id or ''}::{signature}"


def summarize_options(selections: Optional[Iterable[Any]]) -> Dict[str, str]:
    """Group name to comma-joined distinct labels, e.g. {"Finish": "Black, Polished"}"""
    options: Dict[str, str] = {}
    for selection in _as_selections(selections):
        group = selection.group or "option"
        label = selection.label or selection.value or "Selected"
        if group not in options:
            options[group] = label
        elif label not in options[group].split(", "):
            options[group] = f"{options[group]}, {label}"
    return options


def is_install_only(flag: Any = None, shipping_class: Optional[str] = None) -> bool:
    if str(flag).strip().lower() == "true":
        return True
    return "installonly" in _NON_LETTERS.sub("", str(shipping_class or "").lower())


def build_configured_item(
    product_id: str,
    name: str,
    base_price: Any,
    selections: Optional[Iterable[Any]] = None,
    **fields: Any,
) -> CartItem:
    """A quantity-1 cart line for a configured product"""
    parsed = _as_selections(selections)
    signature = selection_signature(parsed)
    total = configure_price(base_price, parsed)
    base = finite_number(base_price) or 0.0
    shipping_class = fields.pop("shipping_class", None)
    install_flag = fields.pop("install_only", None)

    return CartItem(
        id=cart_line_id(product_id, signature),
        name=name or "Item",
        price=total,
        base_price=base,
        extra=round(total - base, 2),
        quantity=1,
        options=summarize_options(parsed),
        selections=parsed,
        signature=signature,
        install_only=is_install_only(install_flag, shipping_class),
        shipping_class=shipping_class,
        product_id=product_id,
        **fields,
    )


def add_item(cart: List[CartItem], item: CartItem) -> List[CartItem]:
    """
    Add a line to the cart, merging with an existing line of the same id

    A merge sums quantities and keeps the incoming price, options and shipping
    flags. Returns a new list; `cart` is not modified.
    """
    merged = list(cart or [])
    for index, existing in enumerate(merged):
        if existing.id == item.id:
            updates = {
                name: getattr(item, name)
                for name in item.model_fields_set
                if name not in ("id", "quantity")
            }
            updates["quantity"] = existing.quantity + item.quantity
            merged[index] = existing.model_copy(update=updates)
            return merged
    merged.append(item)
    return merged


def cart_subtotal(items: Iterable[CartItem]) -> float:
    return round(sum(item.line_total for item in items or []), 2)


def _to_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value:
        return str(value)
    return None


def generate_key() -> str:
    return uuid.uuid4().hex


def create_order_cart_item(data: Dict[str, Any]) -> OrderCartItem:
    """Coerce one loose cart dict into an OrderCartItem with a fresh `_key`"""
    categories = data.get("categories")
    if isinstance(categories, list):
        categories = [text for text in (_to_text(c) for c in categories) if text] or None
    else:
        categories = None

    metadata = data.get("metadata")
    price = finite_number(data.get("price"))
    quantity = finite_number(data.get("quantity"))

    return OrderCartItem(
        key=generate_key(),
        id=_to_text(data.get("id")),
        sku=_to_text(data.get("sku")),
        name=_to_text(data.get("name")) or _to_text(data.get("description")),
        price=price if price is not None else 0.0,
        quantity=quantity if quantity is not None else 1,
        categories=categories,
        image=_to_text(data.get("image")),
        product_url=_to_text(data.get("productUrl", data.get("product_url"))),
        product_slug=_to_text(data.get("productSlug", data.get("product_slug"))),
        metadata=metadata if isinstance(metadata, dict) and metadata else None,
    )


def ensure_order_cart_items(items: Any) -> List[OrderCartItem]:
    """Every entry as an OrderCartItem; non-dict entries become the item name"""
    if not isinstance(items, list):
        return []
    result = []
    for item in items:
        if isinstance(item, dict):
            result.append(create_order_cart_item(item))
        else:
            result.append(create_order_cart_item({"name": item}))
    return result
