"""
Models package for the AccessMenu ordering core.

Catalog models (pydantic), order line items and results (dataclasses).
SQLAlchemy tables live in ``accessmenu.models.catalog`` and are imported
on demand so the pure core does not pull in the database layer.
"""

from .language import Language, localize
from .dish import Variant, Dish, Menu
from .order import ProtocolState, StaffResponse, LineItemKey, OrderLineItem
from .results import Outcome, OperationResult

__all__ = [
    "Language",
    "localize",
    "Variant",
    "Dish",
    "Menu",
    "ProtocolState",
    "StaffResponse",
    "LineItemKey",
    "OrderLineItem",
    "Outcome",
    "OperationResult",
]
