# stockroom/services/filters.py
import math
import unicodedata
from decimal import Decimal
from typing import Iterable, List

from stockroom.schemas.product import Product, ProductFilters


def price_text(value: float) -> str:
    """
    Render a number the way the mobile client prints it (JS Number#toString).

    Shortest round-trip digits; plain notation while the decimal point sits
    between 1e-7 and 1e21, exponent notation ("1e+21", "1.5e-7") outside.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    parsed = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in parsed.digits)
    k = len(digits)
    # Position of the decimal point relative to the first digit
    n = parsed.exponent + k

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        exponent = n - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        text = f"{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"
    return sign + text


def total_quantity(product: Product) -> int:
    return sum(stock.quantity for stock in product.stocks)


def _name_key(name: str) -> str:
    # Accent and case insensitive ordering ("Écran" sorts with "ecran")
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def _contains(field: str, needle: str) -> bool:
    return needle.lower() in (field or "").lower()


SORT_KEYS = {
    "name": lambda p: _name_key(p.name),
    "price": lambda p: p.display_price,
    "quantity": total_quantity,
}


def apply_filters(products: Iterable[Product], filters: ProductFilters) -> List[Product]:
    """
    Filter modal: every non-empty field must match (AND), then sort.

    Sorting is always ascending and the result is reversed for "desc",
    so products with equal keys come out in inverted order.
    """
    filtered = list(products)

    if filters.name:
        filtered = [p for p in filtered if _contains(p.name, filters.name)]
    if filters.type:
        filtered = [p for p in filtered if _contains(p.type, filters.type)]
    if filters.price:
        filtered = [p for p in filtered if filters.price in price_text(p.price)]
    if filters.supplier:
        filtered = [p for p in filtered if _contains(p.supplier, filters.supplier)]

    filtered.sort(key=SORT_KEYS[filters.sort_by])

    if filters.sort_order == "desc":
        filtered.reverse()
    return filtered


def search_products(products: Iterable[Product], query: str) -> List[Product]:
    """Search box: a product matches when ANY of its text fields contains the query."""
    return [
        p for p in products
        if _contains(p.name, query)
        or _contains(p.type, query)
        or query in price_text(p.price)
        or _contains(p.supplier, query)
    ]
