"""
Order ledger - line items, quantities and totals for one diner
"""
import logging
from typing import Dict, Iterator, List, Optional

from accessmenu.core.exceptions import ErrorCode
from accessmenu.models.dish import Dish
from accessmenu.models.order import LineItemKey, OrderLineItem, ProtocolState
from accessmenu.models.results import OperationResult

logger = logging.getLogger(__name__)


class OrderLedger:
    """
    Ordered collection of line items, at most one per LineItemKey.
    
    Lines keep insertion order for display. A line whose quantity drops to
    zero is removed, never kept with quantity 0. Length limits on notes are
    enforced by the caller; the ledger only trims them.
    """

    def __init__(self):
        self._items: Dict[LineItemKey, OrderLineItem] = {}
        self._dishes: Dict[str, Dish] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[OrderLineItem]:
        return iter(list(self._items.values()))

    def __contains__(self, key: LineItemKey) -> bool:
        return key in self._items

    def items(self) -> List[OrderLineItem]:
        return list(self._items.values())

    def get(self, key: LineItemKey) -> Optional[OrderLineItem]:
        return self._items.get(key)

    def dish_for(self, item: OrderLineItem) -> Optional[Dish]:
        return self._dishes.get(item.dish_id)

    def add_item(
        self,
        dish: Dish,
        variant_id: Optional[str] = None,
        note: Optional[str] = None
    ) -> OperationResult:
        """
        Add one unit of a dish.
        
        Merges into the line with the same (dish, variant, note) key, or
        appends a new line with quantity 1. A new line with a note starts
        Pending, without one NoQuestion.
        
        Args:
            dish: Catalog dish, also the unit-price source
            variant_id: Selected variant, required when the dish has variants
            note: Optional question for staff
            
        Returns:
            OperationResult carrying the affected key
        """
        if variant_id is not None and dish.find_variant(variant_id) is None:
            return OperationResult.reject(
                ErrorCode.UNKNOWN_VARIANT,
                f"Dish {dish.id} has no variant '{variant_id}'"
            )
        if variant_id is None and dish.has_variants:
            return OperationResult.reject(
                ErrorCode.VARIANT_REQUIRED,
                f"Dish {dish.id} requires a variant"
            )

        key = LineItemKey.of(dish.id, variant_id, note)
        self._dishes[dish.id] = dish

        existing = self._items.get(key)
        if existing is not None:
            existing.quantity += 1
            logger.debug(f"Merged add into line {key} (quantity {existing.quantity})")
            return OperationResult.ok(key)

        self._items[key] = OrderLineItem(
            dish_id=key.dish_id,
            variant_id=key.variant_id,
            note=key.note,
            quantity=1,
            response_state=ProtocolState.PENDING if key.note else ProtocolState.NO_QUESTION,
        )
        logger.debug(f"Appended line {key}")
        return OperationResult.ok(key)

    def update_quantity(self, key: LineItemKey, new_quantity: int) -> OperationResult:
        """Set a line's quantity; zero or less removes the line. No upper bound."""
        if key not in self._items:
            return OperationResult.reject(
                ErrorCode.INVALID_LINE_ITEM,
                f"No line item {key}",
                key
            )
        if new_quantity <= 0:
            del self._items[key]
            return OperationResult.ok(key, "removed")
        self._items[key].quantity = new_quantity
        return OperationResult.ok(key)

    def remove_item(self, key: LineItemKey) -> OperationResult:
        """Remove a line; removing an absent key is a no-op."""
        if self._items.pop(key, None) is None:
            return OperationResult.no_op(key=key)
        return OperationResult.ok(key)

    def attach_note(self, key: LineItemKey, note: Optional[str]) -> OperationResult:
        """
        Attach a question to a line that has none yet.
        
        The note is part of the key, so the line is re-keyed; it merges into
        an existing line with the resulting key.
        """
        item = self._items.get(key)
        if item is None:
            return OperationResult.reject(ErrorCode.INVALID_LINE_ITEM, f"No line item {key}", key)
        note = (note or "").strip()
        if not note:
            return OperationResult.reject(ErrorCode.EMPTY_NOTE, "Note is empty", key)
        if item.response_state != ProtocolState.NO_QUESTION:
            return OperationResult.invalid_transition(
                f"Line {key} already has a question ({item.response_state.value})", key
            )
        new_key = self._rekey(key, key.with_note(note))
        merged = self._items[new_key]
        # A pre-existing line with this note keeps its own answer
        if merged.response_state == ProtocolState.NO_QUESTION:
            merged.response_state = ProtocolState.PENDING
        return OperationResult.ok(new_key)

    def update_variant(self, key: LineItemKey, variant_id: str) -> OperationResult:
        """Switch a line to another variant of the same dish."""
        item = self._items.get(key)
        if item is None:
            return OperationResult.reject(ErrorCode.INVALID_LINE_ITEM, f"No line item {key}", key)
        dish = self._dishes.get(item.dish_id)
        if dish is None or dish.find_variant(variant_id) is None:
            return OperationResult.reject(
                ErrorCode.UNKNOWN_VARIANT,
                f"Dish {item.dish_id} has no variant '{variant_id}'",
                key
            )
        if str(variant_id) == item.variant_id:
            return OperationResult.no_op(key=key)
        return OperationResult.ok(self._rekey(key, key.with_variant(str(variant_id))))

    def _rekey(self, old_key: LineItemKey, new_key: LineItemKey) -> LineItemKey:
        item = self._items[old_key]
        target = self._items.get(new_key)
        if target is not None:
            target.quantity += item.quantity
            del self._items[old_key]
            return new_key

        # Rebuild to keep the line at its original position
        item.variant_id = new_key.variant_id
        item.note = new_key.note
        self._items = {
            (new_key if k == old_key else k): v for k, v in self._items.items()
        }
        return new_key

    def clear(self) -> None:
        self._items.clear()
        self._dishes.clear()

    def unit_price(self, item: OrderLineItem) -> float:
        dish = self._dishes.get(item.dish_id)
        return dish.unit_price(item.variant_id) if dish else 0.0

    def line_total(self, item: OrderLineItem) -> float:
        return self.unit_price(item) * item.quantity

    def subtotal(self) -> float:
        return sum(self.line_total(item) for item in self._items.values())

    def item_count(self) -> int:
        return sum(item.quantity for item in self._items.values())
