"""
Catalog data models read by the ordering core.

The catalog is owned externally; these models are parsed from whatever
the provider returns and are never mutated by the core.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional

from .language import Language, localize


def _dedupe_labels(labels: List[str]) -> List[str]:
    seen = []
    for label in labels:
        label = str(label).strip()
        if label and label not in seen:
            seen.append(label)
    return seen


class Variant(BaseModel):
    """Priced option of a dish (size, portion...) overriding its base price"""
    id: str
    name: str
    price: float = Field(ge=0.0)
    
    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        return str(v)


class Dish(BaseModel):
    """Catalog entry with per-language text"""
    id: str
    name: Dict[str, str]
    description: Dict[str, str] = Field(default_factory=dict)
    explanation: Optional[Dict[str, str]] = None
    price: float = Field(ge=0.0)
    allergens: List[str] = Field(default_factory=list)
    dietary_tags: List[str] = Field(default_factory=list)
    section: Dict[str, str] = Field(default_factory=dict)
    variants: List[Variant] = Field(default_factory=list)
    
    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        return str(v)
    
    @field_validator('name')
    @classmethod
    def require_base_name(cls, v):
        """Every dish needs a base-language name"""
        if not v.get(Language.BASE.value):
            raise ValueError(f"name must contain a '{Language.BASE.value}' entry")
        return v
    
    @field_validator('allergens', 'dietary_tags')
    @classmethod
    def dedupe(cls, v):
        return _dedupe_labels(v)
    
    @property
    def has_variants(self) -> bool:
        return len(self.variants) > 0
    
    def find_variant(self, variant_id: Optional[str]) -> Optional[Variant]:
        if variant_id is None:
            return None
        for variant in self.variants:
            if variant.id == str(variant_id):
                return variant
        return None
    
    def unit_price(self, variant_id: Optional[str] = None) -> float:
        """Variant price when a matching variant is selected, base price otherwise"""
        variant = self.find_variant(variant_id)
        return variant.price if variant else self.price
    
    def display_name(self, language) -> str:
        return localize(self.name, language)
    
    def display_description(self, language) -> str:
        return localize(self.description, language)
    
    def display_explanation(self, language) -> str:
        return localize(self.explanation, language)
    
    def section_name(self, language) -> str:
        return localize(self.section, language)


class Menu(BaseModel):
    """A restaurant menu as returned by the catalog provider"""
    id: str
    name: str
    dishes: List[Dish] = Field(default_factory=list)
    
    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        return str(v)
    
    def get_dish(self, dish_id: str) -> Optional[Dish]:
        for dish in self.dishes:
            if dish.id == str(dish_id):
                return dish
        return None
