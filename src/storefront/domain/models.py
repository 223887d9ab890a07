# src/storefront/domain/models.py
from __future__ import annotations

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field, computed_field

# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------


class Market(StrEnum):
    GERMANY = "germany"
    DENMARK = "denmark"


class StoragePurpose(StrEnum):
    """Suffixes of the persisted keys. Renaming one orphans existing user data."""

    RECENTLY_VIEWED = "recently_viewed"
    SEARCH_HISTORY = "search_history"
    CHECKOUT_DATA = "checkout_data"
    ONBOARDING_COMPLETED = "onboarding_completed"
    TUTORIAL_COMPLETED = "onboarding_tutorial_completed"


def storage_key(namespace: str, purpose: StoragePurpose | str) -> str:
    return f"{namespace}:{purpose}"


# ---------------------------------------------------------------------------
# Aggregate: Product
# Read model owned by the catalog; never mutated by history or recommendations.
# ---------------------------------------------------------------------------


class Product(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=512)
    category: str = Field(min_length=1, description="e.g. 'fresh' or 'frozen'")
    active: bool = True
    description: str | None = None
    image_url: str | None = None

    price_germany: Decimal | None = Field(default=None, ge=0)
    price_denmark: Decimal | None = Field(default=None, ge=0)
    stock_germany: int = Field(default=0, ge=0)
    stock_denmark: int = Field(default=0, ge=0)

    def stock_for(self, market: Market) -> int:
        if market == Market.DENMARK:
            return self.stock_denmark
        return self.stock_germany

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class HistoryEntry(BaseModel):
    """One viewed product or issued search query."""

    key: str = Field(min_length=1, description="Product id or search query")
    timestamp: int = Field(ge=0, description="Milliseconds since epoch")
    tag: str | None = Field(default=None, description="Category of the product or search")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Checkout Draft
# Every field is optional: a draft is built up from partial updates.
# ---------------------------------------------------------------------------


class DeliveryAddress(BaseModel):
    street: str = ""
    city: str = ""
    postal_code: str = ""
    phone: str = ""
    instructions: str = ""


class PaymentDetails(BaseModel):
    card_number: str = ""
    expiry_date: str = ""
    cvv: str = ""
    cardholder_name: str = ""


class CheckoutDraft(BaseModel):
    is_home_delivery: bool | None = None
    pickup_point_id: str | None = None
    address: DeliveryAddress | None = None
    payment_method: str | None = None
    payment_details: PaymentDetails | None = None

    def changed_fields(self) -> dict[str, object]:
        """Only the fields that were explicitly provided, JSON-ready."""
        return self.model_dump(mode="json", exclude_unset=True)


# ---------------------------------------------------------------------------
# Onboarding & Storage Maintenance
# ---------------------------------------------------------------------------


class OnboardingStatus(BaseModel):
    onboarding_completed: bool = False
    tutorial_completed: bool = False


class StorageUsage(BaseModel):
    key_count: int = 0
    total_bytes: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_megabytes(self) -> float:
        return round(self.total_bytes / (1024 * 1024), 2)


# ---------------------------------------------------------------------------
# API Request/Response Schemas
# ---------------------------------------------------------------------------


class ProductCreate(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=512)
    category: str = Field(min_length=1)
    active: bool = True
    description: str | None = None
    image_url: str | None = None
    price_germany: Decimal | None = Field(default=None, ge=0)
    price_denmark: Decimal | None = Field(default=None, ge=0)
    stock_germany: int = Field(default=0, ge=0)
    stock_denmark: int = Field(default=0, ge=0)


class SearchCreate(BaseModel):
    query: str = Field(min_length=1, max_length=256)
    category: str | None = None


class ClearedKeys(BaseModel):
    removed: list[str]


class AutoSaveStatus(BaseModel):
    state: str
    pending_fields: list[str]
