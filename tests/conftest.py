"""
Shared fixtures: a sample menu, in-memory catalog database and an API client
wired to a manual scheduler.
"""
import pytest
from fastapi.testclient import TestClient

from accessmenu.config.settings import Settings
from accessmenu.core.db import build_engine, build_session_factory, init_db
from accessmenu.core.dependencies import ServiceContainer
from accessmenu.core.scheduler import ManualScheduler
from accessmenu.models.catalog import MenuDishRecord, MenuRecord
from accessmenu.models.dish import Dish, Menu
from accessmenu.services.order_ledger import OrderLedger
from accessmenu.services.order_session import OrderSession


SAMPLE_DISHES = [
    {
        "id": "pad-thai",
        "name": {"en": "Pad Thai", "zh": "泰式炒河粉", "es": "Pad Thai"},
        "description": {"en": "Stir-fried rice noodles with tamarind", "zh": "罗望子炒米粉"},
        "explanation": {"en": "Thailand's best known noodle dish"},
        "price": 12.5,
        "allergens": ["peanuts", "shellfish", "egg"],
        "dietary_tags": ["gluten_free"],
        "section": {"en": "Mains", "zh": "主菜", "es": "Platos principales"},
    },
    {
        "id": "green-curry",
        "name": {"en": "Green Curry", "zh": "绿咖喱"},
        "description": {"en": "Coconut curry with Thai basil"},
        "price": 14.0,
        "allergens": [],
        "dietary_tags": ["vegan", "gluten_free"],
        "section": {"en": "Mains", "zh": "主菜"},
    },
    {
        "id": "spring-rolls",
        "name": {"en": "Spring Rolls", "fr": "Rouleaux de printemps"},
        "description": {"en": "Crispy vegetable rolls"},
        "price": 6.0,
        "allergens": ["gluten"],
        "dietary_tags": ["vegetarian"],
        "section": {"en": "Starters", "zh": "前菜"},
    },
    {
        "id": "iced-coffee",
        "name": {"en": "Iced Coffee"},
        "price": 3.0,
        "allergens": ["Milk"],
        "dietary_tags": ["Vegetarian"],
        "section": {"en": "Drinks"},
        "variants": [
            {"id": "small", "name": "Small", "price": 3.0},
            {"id": "large", "name": "Large", "price": 4.5},
        ],
    },
]


@pytest.fixture
def sample_dishes():
    return SAMPLE_DISHES


@pytest.fixture
def dishes():
    return [Dish.model_validate(d) for d in SAMPLE_DISHES]


@pytest.fixture
def menu(dishes):
    return Menu(id="menu-1", name="Bangkok Kitchen", dishes=dishes)


@pytest.fixture
def pad_thai(menu):
    return menu.get_dish("pad-thai")


@pytest.fixture
def coffee(menu):
    return menu.get_dish("iced-coffee")


@pytest.fixture
def ledger():
    return OrderLedger()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def order_session(menu, scheduler):
    session = OrderSession(menu, scheduler=scheduler)
    yield session
    session.dispose()


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def seeded_menu_id(session_factory):
    """Store the sample menu in the catalog tables and return its id"""
    with session_factory() as db:
        record = MenuRecord(name="Bangkok Kitchen")
        for dish in SAMPLE_DISHES:
            record.dishes.append(MenuDishRecord(
                name=dish["name"],
                description=dish.get("description", {}),
                explanation=dish.get("explanation"),
                section=dish.get("section", {}),
                price=dish["price"],
                allergens=dish.get("allergens", []),
                dietary_tags=dish.get("dietary_tags", []),
                variants=dish.get("variants", []),
            ))
        db.add(record)
        db.commit()
        return str(record.id)


@pytest.fixture
def test_settings():
    return Settings(environment="testing")


@pytest.fixture
def container(test_settings, session_factory):
    container = ServiceContainer(
        settings=test_settings,
        session_factory=session_factory,
        scheduler_factory=ManualScheduler
    )
    container.initialize()
    return container


@pytest.fixture
def client(container):
    from accessmenu.main import create_app
    app = create_app(container)
    return TestClient(app)
