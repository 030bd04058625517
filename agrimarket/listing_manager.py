# agrimarket/listing_manager.py

from typing import List, Optional
from pydantic import ValidationError as ModelValidationError
from .errors import ValidationError
from .models import Crop
from .repository import Repository

REQUIRED_LISTING_FIELDS = ("name", "category", "quantity", "price")
# Set by the owner or the system, never by an edit
PROTECTED_FIELDS = ("id", "farmer_id", "created_at")


def _check_required(data: dict):
    missing = [f for f in REQUIRED_LISTING_FIELDS if not data.get(f)]
    if missing:
        raise ValidationError.missing(missing)


def _build(data: dict) -> Crop:
    try:
        return Crop.model_validate(data)
    except ModelValidationError as e:
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ValidationError(f"Invalid listing details: {', '.join(fields)}", fields) from e


class ListingManager:
    """Handles creating, editing and deleting crop listings.

    Any create or edit leaves the listing unapproved until an admin approves it again.
    """

    def __init__(self, crops: Repository[Crop]):
        self.crops = crops

    def create_listing(self, data: dict, owner_id: str, owner_name: str) -> Crop:
        data = self.crops.field_names(data)
        _check_required(data)

        fields = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
        fields.update(farmer_id=owner_id, farmer_name=owner_name, is_approved=False)
        crop = _build(fields)

        self.crops.insert(crop)
        print(f"---LISTING MANAGER: Created listing {crop.id} ({crop.name}) for {owner_name}---")
        return crop

    def update_listing(self, crop_id: str, patch: dict) -> Optional[Crop]:
        existing = self.crops.get(crop_id)
        if existing is None:
            print(f"---LISTING MANAGER: No listing {crop_id} to update---")
            return None

        patch = {k: v for k, v in self.crops.field_names(patch).items() if k not in PROTECTED_FIELDS}
        merged = {**existing.model_dump(), **patch, "is_approved": False}
        _check_required(merged)
        _build(merged)

        updated = self.crops.update_by_id(crop_id, merged)
        print(f"---LISTING MANAGER: Updated listing {crop_id}, awaiting approval---")
        return updated

    def delete_listing(self, crop_id: str) -> bool:
        deleted = self.crops.delete_by_id(crop_id)
        if deleted:
            print(f"---LISTING MANAGER: Deleted listing {crop_id}---")
        return deleted

    def listings_for_farmer(self, farmer_id: str) -> List[Crop]:
        return self.crops.filter(lambda c: c.farmer_id == farmer_id)

    def approved_listings(self) -> List[Crop]:
        return self.crops.filter(lambda c: c.is_approved)
