"""
Unit tests for menu filtering, search and grouping
"""
from accessmenu.models.dish import Dish
from accessmenu.models.language import Language
from accessmenu.services.menu_filter import (
    OTHER_SECTION,
    active_filters,
    available_labels,
    filter_dishes,
    group_by_section,
    search_dishes,
    section_counts,
)


def ids(dishes):
    return [d.id for d in dishes]


def test_no_filters_is_identity(dishes):
    assert ids(filter_dishes(dishes)) == ids(dishes)
    assert ids(filter_dishes(dishes, [], [])) == ids(dishes)


def test_exclude_allergen_drops_any_match(dishes):
    visible = filter_dishes(dishes, excluded_allergens=["peanuts", "gluten"])
    assert ids(visible) == ["green-curry", "iced-coffee"]


def test_required_tags_need_all(dishes):
    assert ids(filter_dishes(dishes, required_dietary_tags=["gluten_free"])) == ["pad-thai", "green-curry"]
    assert ids(filter_dishes(dishes, required_dietary_tags=["gluten_free", "vegan"])) == ["green-curry"]


def test_combined_filters(dishes):
    visible = filter_dishes(dishes, excluded_allergens=["milk"], required_dietary_tags=["vegetarian"])
    assert ids(visible) == ["spring-rolls"]


def test_labels_are_trimmed_and_case_folded(dishes):
    assert ids(filter_dishes(dishes, excluded_allergens=[" MILK "])) == ["pad-thai", "green-curry", "spring-rolls"]
    assert ids(filter_dishes(dishes, required_dietary_tags=["vegetarian"])) == ["spring-rolls", "iced-coffee"]


def test_filter_result_is_subset_in_original_order(dishes):
    visible = filter_dishes(list(reversed(dishes)), excluded_allergens=["egg"])
    assert ids(visible) == ["iced-coffee", "spring-rolls", "green-curry"]


def test_group_by_section_keeps_first_seen_order(dishes):
    groups = group_by_section(dishes)
    assert list(groups) == ["Mains", "Starters", "Drinks"]
    assert ids(groups["Mains"]) == ["pad-thai", "green-curry"]


def test_group_by_section_localized_with_fallback(dishes):
    groups = group_by_section(dishes, Language.CHINESE)
    assert list(groups) == ["主菜", "前菜", "Drinks"]


def test_dish_without_section_goes_to_other():
    dish = Dish(id=1, name={"en": "Water"}, price=0)
    assert list(group_by_section([dish])) == [OTHER_SECTION]


def test_grouping_preserves_every_dish(dishes):
    groups = group_by_section(dishes, Language.SPANISH)
    assert sorted(d.id for group in groups.values() for d in group) == sorted(ids(dishes))
    assert sum(section_counts(dishes).values()) == len(dishes)


def test_search_matches_name_description_and_section(dishes):
    assert ids(search_dishes(dishes, "curry")) == ["green-curry"]
    assert ids(search_dishes(dishes, "NOODLES")) == ["pad-thai"]
    assert ids(search_dishes(dishes, "drinks")) == ["iced-coffee"]
    assert ids(search_dishes(dishes, "   ")) == ids(dishes)


def test_search_in_display_language(dishes):
    assert ids(search_dishes(dishes, "炒河粉", Language.CHINESE)) == ["pad-thai"]
    assert ids(search_dishes(dishes, "rouleaux", Language.FRENCH)) == ["spring-rolls"]


def test_available_labels(dishes):
    allergens, tags = available_labels(dishes)
    assert allergens == ["peanuts", "shellfish", "egg", "gluten", "Milk"]
    assert tags == ["gluten_free", "vegan", "vegetarian"]


def test_active_filter_chips():
    chips = active_filters(["peanuts"], ["gluten_free"])
    assert [(c.id, c.type, c.label) for c in chips] == [
        ("allergen-peanuts", "allergen", "Peanuts"),
        ("diet-gluten_free", "diet", "Gluten free"),
    ]
