"""Restock - Purchase pattern prediction and fuzzy product matching."""

from .analytics import ProductNotFoundError, RestockAnalytics
from .config import ConfigManager
from .data_store import DataStore
from .estimator import estimate_frequency
from .history import (
    BUFFER_SECONDS,
    deduplicate_events,
    group_by,
    has_recent_purchase,
    last_purchase_date,
)
from .list_manager import DuplicateItemError, ItemNotFoundError, ListManager
from .matcher import (
    DUTCH_RULES,
    MatchRules,
    decide_match,
    is_acceptable_match,
    match_level,
    normalize_name,
)
from .models import (
    CadenceEstimate,
    ExpectedProduct,
    MatchCandidate,
    MatchDecision,
    MatchLevel,
    Product,
    ProductStatistics,
    PurchaseEvent,
    ShoppingList,
    ShoppingListItem,
    Snooze,
    Suggestion,
    SuggestionType,
)
from .output_formatter import OutputFormatter
from .prediction import (
    estimate_cadence,
    format_purchase_frequency,
    lead_time_days,
    predict_next_purchase,
    rank_due,
    should_suggest,
)
from .search import ProductSearchIndex

__version__ = "0.1.0"

__all__ = [
    "BUFFER_SECONDS",
    "CadenceEstimate",
    "ConfigManager",
    "DataStore",
    "decide_match",
    "deduplicate_events",
    "DuplicateItemError",
    "DUTCH_RULES",
    "estimate_cadence",
    "estimate_frequency",
    "ExpectedProduct",
    "format_purchase_frequency",
    "group_by",
    "has_recent_purchase",
    "is_acceptable_match",
    "ItemNotFoundError",
    "last_purchase_date",
    "lead_time_days",
    "ListManager",
    "match_level",
    "MatchCandidate",
    "MatchDecision",
    "MatchLevel",
    "MatchRules",
    "normalize_name",
    "OutputFormatter",
    "predict_next_purchase",
    "Product",
    "ProductNotFoundError",
    "ProductSearchIndex",
    "ProductStatistics",
    "PurchaseEvent",
    "rank_due",
    "RestockAnalytics",
    "ShoppingList",
    "ShoppingListItem",
    "should_suggest",
    "Snooze",
    "Suggestion",
    "SuggestionType",
]
