# agrimarket/marketplace.py

from typing import Optional
from .admin_manager import AdminManager
from .config import Settings, settings as default_settings
from .listing_manager import ListingManager
from .message_manager import MessageManager
from .models import Crop, Message, Order, User
from .order_manager import OrderManager
from .repository import Repository
from .session_manager import SessionManager
from .storage import EntityStore, KeyValueStore, create_store, USERS, CROPS, ORDERS, MESSAGES


class Marketplace:
    """
    Wires the store, one repository per collection, and the managers together.
    This is the single object the UI holds on to.
    """
    def __init__(self, kv_store: Optional[KeyValueStore] = None, config: Settings = default_settings):
        self.config = config
        self.store = EntityStore(kv_store if kv_store is not None else create_store(config))

        self.users = Repository(self.store, USERS, User)
        self.crops = Repository(self.store, CROPS, Crop)
        self.orders = Repository(self.store, ORDERS, Order)
        self.messages = Repository(self.store, MESSAGES, Message)

        self.session = SessionManager(self.store, self.users, config)
        self.listings = ListingManager(self.crops)
        self.order_manager = OrderManager(self.orders, self.crops)
        self.messaging = MessageManager(self.messages)
        self.admin = AdminManager(self.users, self.crops, self.orders)
