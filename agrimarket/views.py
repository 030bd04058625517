# agrimarket/views.py
"""Read-side computations behind the dashboards.

All functions are pure and keep the order of the lists they are given.
"""

from typing import Iterable, List, Optional
from .models import BuyerStats, Crop, FarmerStats, Order, OrderView, PlatformStats, User

UNKNOWN = "Unknown"
UNKNOWN_CROP = "Unknown Crop"


def _matches(term: str, *values: Optional[str]) -> bool:
    term = term.lower()
    return any(term in (v or "").lower() for v in values)


def filter_listings(
    crops: Iterable[Crop],
    search: str = "",
    category: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    approved_only: bool = False,
    owner_id: Optional[str] = None,
) -> List[Crop]:
    result = []
    for crop in crops:
        if approved_only and not crop.is_approved:
            continue
        if owner_id is not None and crop.farmer_id != owner_id:
            continue
        if search and not _matches(search, crop.name, crop.location, crop.farmer_name, crop.category):
            continue
        if category and category != "all" and crop.category != category:
            continue
        if min_price is not None and crop.price < min_price:
            continue
        if max_price is not None and crop.price > max_price:
            continue
        result.append(crop)
    return result


def listing_categories(crops: Iterable[Crop]) -> List[str]:
    categories = ["all"]
    for crop in crops:
        if crop.category not in categories:
            categories.append(crop.category)
    return categories


def search_users(users: Iterable[User], term: str = "") -> List[User]:
    return [u for u in users if not term or _matches(term, u.name, u.email)]


def compute_stats(users: List[User], crops: List[Crop], orders: List[Order]) -> PlatformStats:
    """Platform-wide counts. Revenue only counts completed orders."""
    def count(items, predicate):
        return sum(1 for item in items if predicate(item))

    return PlatformStats(
        total_users=len(users),
        total_farmers=count(users, lambda u: u.role == "farmer"),
        total_buyers=count(users, lambda u: u.role == "buyer"),
        total_admins=count(users, lambda u: u.role == "admin"),
        total_crops=len(crops),
        approved_crops=count(crops, lambda c: c.is_approved),
        pending_approvals=count(crops, lambda c: not c.is_approved),
        total_orders=len(orders),
        pending_orders=count(orders, lambda o: o.status == "pending"),
        accepted_orders=count(orders, lambda o: o.status == "accepted"),
        rejected_orders=count(orders, lambda o: o.status == "rejected"),
        completed_orders=count(orders, lambda o: o.status == "completed"),
        total_revenue=sum(o.total_price for o in orders if o.status == "completed"),
    )


def farmer_stats(crops: List[Crop]) -> FarmerStats:
    return FarmerStats(
        total_crops=len(crops),
        approved_crops=sum(1 for c in crops if c.is_approved),
        pending_crops=sum(1 for c in crops if not c.is_approved),
        total_value=sum(c.price * c.quantity for c in crops),
    )


def buyer_stats(orders: List[Order]) -> BuyerStats:
    return BuyerStats(
        total_orders=len(orders),
        pending_orders=sum(1 for o in orders if o.status == "pending"),
        completed_orders=sum(1 for o in orders if o.status == "completed"),
    )


def describe_orders(orders: Iterable[Order], crops: Iterable[Crop], users: Iterable[User]) -> List[OrderView]:
    """Resolves names for display. Deleted crops and users show as placeholders."""
    crops_by_id = {c.id: c for c in crops}
    names_by_id = {u.id: u.name for u in users}

    views = []
    for order in orders:
        crop = crops_by_id.get(order.crop_id)
        views.append(OrderView(
            order=order,
            crop_name=crop.name if crop else UNKNOWN_CROP,
            unit=crop.unit if crop else "",
            buyer_name=names_by_id.get(order.buyer_id, UNKNOWN),
            farmer_name=names_by_id.get(order.farmer_id, UNKNOWN),
        ))
    return views


def recent_orders(orders: List[Order], limit: int = 3) -> List[Order]:
    return list(orders)[:limit]
