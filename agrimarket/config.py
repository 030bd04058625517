# agrimarket/config.py

from typing import Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Loads application settings from .env file."""
    storage_backend: str = "mongo"  # "mongo" or "memory"

    mongo_uri: Optional[str] = None
    mongo_user: Optional[str] = None
    mongo_password: Optional[str] = None
    mongo_host: str = "localhost"
    mongo_port: int = 27017
    db_name: str = "agrimarket_db"
    kv_collection: str = "kv_store"

    # The one admin account that is not stored in the users collection
    admin_email: str = "admin@agrimarket.local"
    admin_password: str = "admin@123"

    # Off by default: login only matches email and role
    verify_passwords: bool = False

    @property
    def final_mongo_uri(self) -> str:
        """Constructs safe MongoDB URI from components (preferred) or returns the provided one."""
        if self.mongo_user and self.mongo_password:
            import urllib.parse
            user = urllib.parse.quote_plus(self.mongo_user)
            password = urllib.parse.quote_plus(self.mongo_password)
            return f"mongodb+srv://{user}:{password}@{self.mongo_host}/"

        if self.mongo_uri:
            return self.mongo_uri

        return f"mongodb://{self.mongo_host}:{self.mongo_port}/"

    class Config:
        env_file = ".env"
        extra = "ignore"

# Create a single, reusable instance of the settings
settings = Settings()
