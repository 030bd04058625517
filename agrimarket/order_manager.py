# agrimarket/order_manager.py

from typing import List, Optional
from .errors import ValidationError
from .models import Crop, Order
from .repository import Repository

# accept/reject are the only farmer actions, and only from pending
ACTIONS = {"accept": "accepted", "reject": "rejected"}


class OrderManager:
    """Places orders against listings and moves them through pending -> accepted | rejected.

    Stock is read when the order is placed and never reserved or decremented,
    so two orders can both pass the check against the same quantity.
    """

    def __init__(self, orders: Repository[Order], crops: Repository[Crop]):
        self.orders = orders
        self.crops = crops

    def place_order(self, crop: Crop, buyer_id: str, quantity: float) -> Order:
        if quantity <= 0 or quantity > crop.quantity:
            raise ValidationError(
                f"Please enter a valid quantity (1-{crop.quantity:g})", ["quantity"]
            )

        order = Order(
            farmer_id=crop.farmer_id,
            buyer_id=buyer_id,
            crop_id=crop.id,
            quantity=quantity,
            total_price=quantity * crop.price,
        )
        self.orders.insert(order)
        print(f"---ORDER MANAGER: Order {order.id} placed for {quantity:g} {crop.unit} of {crop.name}---")
        return order

    def place_order_for(self, crop_id: str, buyer_id: str, quantity: float) -> Order:
        return self.place_order(self.crops.require(crop_id), buyer_id, quantity)

    def set_order_status(self, order_id: str, action: str) -> Optional[Order]:
        if action not in ACTIONS:
            raise ValidationError(f"Unknown order action '{action}'", ["action"])

        order = self.orders.get(order_id)
        if order is None:
            print(f"---ORDER MANAGER: No order {order_id}---")
            return None
        if order.status != "pending":
            print(f"---ORDER MANAGER: Order {order_id} is already {order.status}, ignoring '{action}'---")
            return order

        updated = self.orders.update_by_id(order_id, {"status": ACTIONS[action]})
        print(f"---ORDER MANAGER: Order {order_id} {updated.status}---")
        return updated

    def orders_for_farmer(self, farmer_id: str) -> List[Order]:
        return self.orders.filter(lambda o: o.farmer_id == farmer_id)

    def orders_for_buyer(self, buyer_id: str) -> List[Order]:
        return self.orders.filter(lambda o: o.buyer_id == buyer_id)
