"""Core data models for Restock."""

from datetime import datetime, timezone
from enum import Enum, IntEnum
from uuid import UUID, uuid4

from pydantic import AwareDatetime, BaseModel, Field

ProductId = UUID


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_aware(value: datetime) -> datetime:
    """Attach UTC to a naive datetime, leave aware ones untouched."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SuggestionType(str, Enum):
    """Why a product shows up as a suggestion chip."""

    BASIC = "basic"
    PREDICTED = "predicted"


class MatchLevel(IntEnum):
    """Confidence that typed text refers to a catalog product."""

    CONFIDENT = 1
    PLAUSIBLE = 2
    NONE = 3


class PurchaseEvent(BaseModel):
    """A single purchase of a product, logged when a list item is checked."""

    id: UUID = Field(default_factory=uuid4)
    household_id: UUID | None = None
    product_id: ProductId
    purchased_at: AwareDatetime
    shopping_list_item_id: UUID | None = None
    added_by: str | None = None


class Product(BaseModel):
    """A catalog product."""

    id: ProductId = Field(default_factory=uuid4)
    household_id: UUID | None = None
    name: str
    category: str | None = None
    is_basic: bool = False
    frequency_correction_factor: float = 1.0
    created_at: AwareDatetime = Field(default_factory=utcnow)


class CadenceEstimate(BaseModel):
    """Derived purchase cadence for one product."""

    product_id: ProductId
    frequency_days: float | None = None
    last_purchase_at: AwareDatetime | None = None

    @property
    def has_estimate(self) -> bool:
        """Whether enough history exists to predict."""
        return self.frequency_days is not None and self.last_purchase_at is not None


class MatchCandidate(BaseModel):
    """A ranked result from the product search index."""

    name: str
    score: float | None = None
    product_id: ProductId | None = None


class MatchDecision(BaseModel):
    """Attach-vs-create decision for a typed product name."""

    accepted: bool
    level: MatchLevel
    candidate: MatchCandidate | None = None


class ShoppingListItem(BaseModel):
    """An entry on the household shopping list."""

    id: UUID = Field(default_factory=uuid4)
    product_id: ProductId
    name: str
    description: str | None = None
    is_checked: bool = False
    checked_at: AwareDatetime | None = None
    added_by: str | None = None
    added_at: AwareDatetime = Field(default_factory=utcnow)


class ShoppingList(BaseModel):
    """The household shopping list."""

    version: str = "1.0"
    last_updated: AwareDatetime = Field(default_factory=utcnow)
    items: list[ShoppingListItem] = Field(default_factory=list)

    def unchecked_product_ids(self) -> set[ProductId]:
        """Products currently waiting to be bought."""
        return {item.product_id for item in self.items if not item.is_checked}


class Snooze(BaseModel):
    """A product hidden from restock lists until a given time."""

    product_id: ProductId
    snoozed_until: AwareDatetime


class ExpectedProduct(BaseModel):
    """A product expected to be bought soon."""

    product_id: ProductId
    name: str
    category: str | None = None
    next_purchase_at: AwareDatetime
    frequency_days: float
    days_until_expected: int = 0


class Suggestion(BaseModel):
    """A restock suggestion chip."""

    product_id: ProductId
    name: str
    suggestion_type: SuggestionType


class ProductStatistics(BaseModel):
    """Purchase statistics shown on a product detail page."""

    product_id: ProductId
    name: str
    purchase_count: int
    frequency_days: float | None = None
    frequency_label: str | None = None
    last_purchase_at: AwareDatetime | None = None
    next_purchase_at: AwareDatetime | None = None
