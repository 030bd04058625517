# agrimarket/market_prices.py

from typing import Iterable, List
from .models import MarketPrice, today_str

# (crop, state, district, market, variety, min, max, modal), in Rs per quintal
_MOCK_QUOTES = [
    ("Tomato", "Maharashtra", "Pune", "Pune Market", "Local", 800, 1200, 1000),
    ("Onion", "Maharashtra", "Nashik", "Nashik Market", "Local", 1500, 2000, 1750),
    ("Rice", "Punjab", "Ludhiana", "Ludhiana Mandi", "Basmati", 2800, 3200, 3000),
    ("Wheat", "Rajasthan", "Jaipur", "Jaipur Mandi", "Dara", 2100, 2300, 2200),
    ("Potato", "Uttar Pradesh", "Agra", "Agra Market", "Local", 600, 900, 750),
]


def get_market_prices() -> List[MarketPrice]:
    """Static mandi quotes dated today. There is no live price feed."""
    today = today_str()
    return [
        MarketPrice(
            crop=crop, state=state, district=district, market=market, variety=variety,
            grade="FAQ", min_price=lo, max_price=hi, modal_price=modal, date=today,
        )
        for crop, state, district, market, variety, lo, hi, modal in _MOCK_QUOTES
    ]


def search_market_prices(prices: Iterable[MarketPrice], term: str = "") -> List[MarketPrice]:
    term = term.lower()
    return [
        p for p in prices
        if term in p.crop.lower() or term in p.state.lower() or term in p.district.lower()
    ]
