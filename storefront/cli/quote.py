# storefront/cli/quote.py
import asyncio
import json
import logging
import click

from storefront.core.config import get_settings
from storefront.schemas.checkout import CheckoutAddress
from storefront.services.shipping.carrier_ids import resolve_carrier_ids
from storefront.services.shipping.factory import get_carrier
from storefront.services.shipping.quote import ShippingQuoteService

logger = logging.getLogger(__name__)


def _load_json(path):
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


@click.group()
@click.option('--verbose', is_flag=True, help='Log at DEBUG level')
def cli(verbose):
    """Shipping quote tools"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@cli.command()
@click.option('--cart', 'cart_path', required=True, type=click.Path(exists=True, dir_okay=False),
              help='JSON file holding a list of {"id", "quantity"} lines')
@click.option('--destination', 'destination_path', required=True, type=click.Path(exists=True, dir_okay=False),
              help='JSON file holding the destination address')
def quote(cart_path, destination_path):
    """Quote a cart and print the result as JSON"""
    cart = _load_json(cart_path)
    destination = _load_json(destination_path)
    if isinstance(cart, dict):
        cart = cart.get("cart") or cart.get("items") or []
    if isinstance(destination, dict) and "line1" in destination:
        destination = CheckoutAddress.from_payload(destination).to_destination_payload()

    result = asyncio.run(ShippingQuoteService().quote(cart, destination))
    click.echo(json.dumps(result.to_payload(), indent=2))
    if not result.success:
        raise SystemExit(1)


@cli.command()
def carriers():
    """Print the carrier ids a quote would use"""
    settings = get_settings()
    ids = asyncio.run(resolve_carrier_ids(settings.shipengine_carrier_ids, get_carrier("shipengine")))
    if not ids:
        click.echo("No carrier ids resolved; ShipEngine will use account defaults")
    for carrier_id in ids:
        click.echo(carrier_id)


if __name__ == "__main__":
    cli()
