"""
Menu filtering and grouping.

Pure functions over a dish list: allergen exclusion, dietary-tag
inclusion, free-text search and grouping by localized section. Label
comparison is trimmed and case-folded on both sides.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from accessmenu.models.dish import Dish
from accessmenu.models.language import Language


OTHER_SECTION = "Other"


@dataclass(frozen=True)
class ActiveFilter:
    """Filter chip shown above the menu"""
    id: str
    type: str  # allergen | diet
    label: str
    value: str


def normalize_label(label: str) -> str:
    return " ".join(str(label).split()).casefold()


def _label_set(labels: Optional[Iterable[str]]) -> set:
    return {normalize_label(label) for label in (labels or []) if str(label).strip()}


def filter_dishes(
    dishes: Sequence[Dish],
    excluded_allergens: Optional[Iterable[str]] = None,
    required_dietary_tags: Optional[Iterable[str]] = None,
) -> List[Dish]:
    """
    Apply allergen and dietary filters.
    
    A dish is dropped if it carries any excluded allergen, and kept only if
    it carries every required dietary tag. Empty filters keep everything;
    surviving dishes keep their relative order.
    """
    excluded = _label_set(excluded_allergens)
    required = _label_set(required_dietary_tags)
    
    if not excluded and not required:
        return list(dishes)
    
    visible = []
    for dish in dishes:
        if excluded and not excluded.isdisjoint(_label_set(dish.allergens)):
            continue
        if required and not required.issubset(_label_set(dish.dietary_tags)):
            continue
        visible.append(dish)
    return visible


def group_by_section(dishes: Sequence[Dish], language=Language.BASE) -> Dict[str, List[Dish]]:
    """Group dishes by localized section label, in first-seen section order."""
    groups: Dict[str, List[Dish]] = {}
    for dish in dishes:
        section = dish.section_name(language) or OTHER_SECTION
        groups.setdefault(section, []).append(dish)
    return groups


def section_counts(dishes: Sequence[Dish], language=Language.BASE) -> Dict[str, int]:
    return {section: len(items) for section, items in group_by_section(dishes, language).items()}


def search_dishes(dishes: Sequence[Dish], query: Optional[str], language=Language.BASE) -> List[Dish]:
    """Case-insensitive substring search over name, description and section."""
    term = (query or "").strip().casefold()
    if not term:
        return list(dishes)
    
    results = []
    for dish in dishes:
        haystacks = (
            dish.display_name(language),
            dish.display_name(Language.BASE),
            dish.display_description(language),
            dish.section_name(language),
        )
        if any(term in text.casefold() for text in haystacks if text):
            results.append(dish)
    return results


def available_labels(dishes: Sequence[Dish]) -> Tuple[List[str], List[str]]:
    """Distinct allergens and dietary tags across the menu, first-seen order."""
    allergens: List[str] = []
    tags: List[str] = []
    seen_allergens, seen_tags = set(), set()
    for dish in dishes:
        for allergen in dish.allergens:
            if normalize_label(allergen) not in seen_allergens:
                seen_allergens.add(normalize_label(allergen))
                allergens.append(allergen)
        for tag in dish.dietary_tags:
            if normalize_label(tag) not in seen_tags:
                seen_tags.add(normalize_label(tag))
                tags.append(tag)
    return allergens, tags


def _chip_label(value: str) -> str:
    text = value.replace("_", " ")
    return text[:1].upper() + text[1:]


def active_filters(
    excluded_allergens: Optional[Iterable[str]] = None,
    required_dietary_tags: Optional[Iterable[str]] = None,
) -> List[ActiveFilter]:
    chips = []
    for allergen in excluded_allergens or []:
        chips.append(ActiveFilter(id=f"allergen-{allergen}", type="allergen",
                                  label=_chip_label(allergen), value=allergen))
    for diet in required_dietary_tags or []:
        chips.append(ActiveFilter(id=f"diet-{diet}", type="diet",
                                  label=_chip_label(diet), value=diet))
    return chips
