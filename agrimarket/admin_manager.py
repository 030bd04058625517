# agrimarket/admin_manager.py

from typing import Optional
from .models import Crop, Order, PlatformStats, User
from .repository import Repository
from .views import compute_stats


class AdminManager:
    """Handles listing moderation, user removal and platform statistics."""

    def __init__(self, users: Repository[User], crops: Repository[Crop], orders: Repository[Order]):
        self.users = users
        self.crops = crops
        self.orders = orders

    def set_listing_approval(self, crop_id: str, approved: bool) -> Optional[Crop]:
        crop = self.crops.update_by_id(crop_id, {"is_approved": bool(approved)})
        if crop is None:
            print(f"---ADMIN MANAGER: No listing {crop_id}---")
        else:
            print(f"---ADMIN MANAGER: Listing {crop_id} {'approved' if approved else 'rejected'}---")
        return crop

    def remove_user(self, user_id: str) -> bool:
        """Deletes the user record only. Their listings and orders stay behind."""
        removed = self.users.delete_by_id(user_id)
        if removed:
            print(f"---ADMIN MANAGER: Deleted user {user_id}---")
        return removed

    compute_stats = staticmethod(compute_stats)

    def platform_stats(self) -> PlatformStats:
        return compute_stats(self.users.all(), self.crops.all(), self.orders.all())
