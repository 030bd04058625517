# agrimarket/models.py

import uuid
from datetime import datetime, timezone, date
from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Role = Literal["farmer", "buyer", "admin"]
OrderStatus = Literal["pending", "accepted", "rejected", "completed"]
PaymentStatus = Literal["pending", "paid", "failed"]

CATEGORIES = ["Vegetables", "Fruits", "Grains", "Pulses", "Spices", "Herbs", "Dairy", "Other"]
UNITS = ["kg", "quintal", "tons", "pieces", "dozen", "liters"]
DELIVERY_OPTIONS = ["Farm Pickup", "Local Delivery", "Transport Available"]


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def today_str() -> str:
    return date.today().isoformat()


class StoredModel(BaseModel):
    """Base for records kept in the key-value store.

    Attributes are snake_case in Python and camelCase in the stored JSON.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self, **kwargs) -> dict:
        return self.model_dump(mode="json", by_alias=True, **kwargs)


class User(StoredModel):
    """A registered farmer or buyer, or the synthetic admin."""
    id: str = Field(default_factory=new_id)
    email: str
    role: Role
    name: str
    phone: Optional[str] = None
    aadhaar: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    hashed_password: Optional[str] = None


class Crop(StoredModel):
    """A crop listing offered for sale by a farmer."""
    id: str = Field(default_factory=new_id)
    farmer_id: str
    farmer_name: str = ""
    name: str
    category: str
    quantity: float
    price: float
    unit: str = ""
    images: List[str] = []
    description: str = ""
    location: str = ""
    available_from: str = Field(default_factory=today_str)
    available_to: str = ""
    delivery_options: List[str] = []
    is_approved: bool = False
    created_at: datetime = Field(default_factory=utc_now)


class Order(StoredModel):
    """A buyer's order against a single listing."""
    id: str = Field(default_factory=new_id)
    farmer_id: str
    buyer_id: str
    crop_id: str
    quantity: float
    total_price: float
    status: OrderStatus = "pending"
    payment_status: PaymentStatus = "pending"
    created_at: datetime = Field(default_factory=utc_now)


class Message(StoredModel):
    """One chat message between two users."""
    id: str = Field(default_factory=new_id)
    chat_id: str
    sender_id: str
    sender_name: str
    recipient_id: str
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    is_read: bool = False


class MarketPrice(StoredModel):
    """A mandi price quote. Static reference data, never persisted."""
    crop: str
    state: str
    district: str
    market: str
    variety: str
    grade: str
    min_price: float
    max_price: float
    modal_price: float
    date: str


class PlatformStats(BaseModel):
    total_users: int = 0
    total_farmers: int = 0
    total_buyers: int = 0
    total_admins: int = 0
    total_crops: int = 0
    approved_crops: int = 0
    pending_approvals: int = 0
    total_orders: int = 0
    pending_orders: int = 0
    accepted_orders: int = 0
    rejected_orders: int = 0
    completed_orders: int = 0
    total_revenue: float = 0


class FarmerStats(BaseModel):
    total_crops: int = 0
    approved_crops: int = 0
    pending_crops: int = 0
    total_value: float = 0  # price x quantity over all of the farmer's listings


class BuyerStats(BaseModel):
    total_orders: int = 0
    pending_orders: int = 0
    completed_orders: int = 0


class OrderView(BaseModel):
    """An order with its crop, buyer and farmer references resolved for display."""
    order: Order
    crop_name: str
    unit: str = ""
    buyer_name: str
    farmer_name: str
