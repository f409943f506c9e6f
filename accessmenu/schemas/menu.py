from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from accessmenu.models.dish import Dish
from accessmenu.models.language import Language
from accessmenu.services.menu_service import MenuView


class VariantOut(BaseModel):
    id: str
    name: str
    price: float


class DishOut(BaseModel):
    id: str
    name: str
    description: str
    explanation: Optional[str] = None
    price: float
    allergens: List[str] = Field(default_factory=list)
    dietary_tags: List[str] = Field(default_factory=list)
    variants: List[VariantOut] = Field(default_factory=list)

    @classmethod
    def from_dish(cls, dish: Dish, language: Language) -> "DishOut":
        return cls(
            id=dish.id,
            name=dish.display_name(language),
            description=dish.display_description(language),
            explanation=dish.display_explanation(language) or None,
            price=dish.price,
            allergens=dish.allergens,
            dietary_tags=dish.dietary_tags,
            variants=[VariantOut(id=v.id, name=v.name, price=v.price) for v in dish.variants],
        )


class SectionOut(BaseModel):
    name: str
    dishes: List[DishOut]


class FilterChipOut(BaseModel):
    id: str
    type: str
    label: str
    value: str


class MenuViewOut(BaseModel):
    menu_id: str
    name: str
    language: str
    sections: List[SectionOut] = Field(default_factory=list)
    section_counts: Dict[str, int] = Field(default_factory=dict)
    total_dishes: int
    visible_dishes: int
    allergens: List[str] = Field(default_factory=list)
    dietary_tags: List[str] = Field(default_factory=list)
    filters: List[FilterChipOut] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: MenuView) -> "MenuViewOut":
        return cls(
            menu_id=view.menu_id,
            name=view.menu.name if view.menu else "",
            language=view.language.value,
            sections=[
                SectionOut(name=name, dishes=[DishOut.from_dish(d, view.language) for d in dishes])
                for name, dishes in view.sections.items()
            ],
            section_counts={name: len(dishes) for name, dishes in view.sections.items()},
            total_dishes=view.total_dishes,
            visible_dishes=view.visible_dishes,
            allergens=view.allergens,
            dietary_tags=view.dietary_tags,
            filters=[
                FilterChipOut(id=f.id, type=f.type, label=f.label, value=f.value)
                for f in view.filters
            ],
        )
