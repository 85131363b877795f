# stockroom/services/statistics.py
import logging
from datetime import datetime, timezone
from typing import Dict, List, Sequence

from stockroom.schemas.product import Product
from stockroom.schemas.stats import CityStock, RankedProduct, Statistics
from stockroom.services.filters import total_quantity
from stockroom.utils.api_client import InventoryApiClient

logger = logging.getLogger(__name__)

# Size of the recency rankings
TOP_N = 5

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def last_edit_date(product: Product) -> datetime:
    """Most recent edit timestamp; products never edited rank at the epoch."""
    if not product.edited_by:
        return EPOCH
    return max(_aware(record.at) for record in product.edited_by)


def compute_statistics(products: Sequence[Product]) -> Statistics:
    # Cities in order of first appearance
    cities: Dict[str, CityStock] = {}
    for product in products:
        for stock in product.stocks:
            if stock.localisation is not None and stock.localisation.city not in cities:
                city = stock.localisation.city
                cities[city] = CityStock(city=city, total_products=0, total_quantity=0)

    out_of_stock = 0
    total_stock_value = 0.0
    ranked: List[RankedProduct] = []

    for product in products:
        quantity = total_quantity(product)
        if not product.stocks or quantity == 0:
            out_of_stock += 1
        total_stock_value += product.display_price * quantity

        held_in: Dict[str, int] = {}
        for stock in product.stocks:
            if stock.localisation is None:
                continue
            city = stock.localisation.city
            held_in[city] = held_in.get(city, 0) + stock.quantity
        for city, city_quantity in held_in.items():
            cities[city].total_products += 1
            cities[city].total_quantity += city_quantity

        ranked.append(RankedProduct(
            product_id=product.id,
            product_name=product.name,
            quantity=quantity,
            last_edit_date=last_edit_date(product),
        ))

    # sorted() is stable with reverse=True: equal dates keep catalog order
    ranked.sort(key=lambda r: r.last_edit_date, reverse=True)

    return Statistics(
        total_products=len(products),
        total_cities=len(cities),
        out_of_stock=out_of_stock,
        total_stock_value=total_stock_value,
        most_added_products=ranked[:TOP_N],
        most_removed_products=[r for r in ranked if r.quantity == 0][:TOP_N],
        stocks_by_city=list(cities.values()),
    )


async def fetch_statistics(api: InventoryApiClient) -> Statistics:
    """Pull the whole catalog once and recompute every aggregate."""
    products = await api.list_products()
    logger.debug(f"Computing statistics over {len(products)} products")
    return compute_statistics(products)
