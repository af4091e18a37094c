import pytest

from locadora import clock, create_app
from locadora.extensions import db
from locadora.services import AuthService, ClientService, EquipmentService, RentalService
from tests.helpers import DAY, NOW, FrozenClock


@pytest.fixture
def frozen_clock(monkeypatch):
    frozen = FrozenClock(NOW)
    monkeypatch.setattr(clock, "now_ms", frozen)
    return frozen


@pytest.fixture
def app(frozen_clock):
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def db_session(app):
    return db.session


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def owner(app):
    return AuthService.register_user("Ana Souza", "ana@example.com", "secret123")


@pytest.fixture
def make_client(owner):
    def _make(name="Construtora Alfa", **overrides):
        payload = {"name": name, "phone": "(11) 98765-4321"}
        payload.update(overrides)
        return ClientService.create_client(owner.id, payload)

    return _make


@pytest.fixture
def make_equipment(owner):
    def _make(name="Mixer", quantity=1, asset_units=None, **overrides):
        payload = {"name": name, "category": "Concrete", "quantity": quantity, "price_daily": "50.00"}
        if asset_units is not None:
            payload["asset_units"] = asset_units
        payload.update(overrides)
        return EquipmentService.create_equipment(owner.id, payload)

    return _make


@pytest.fixture
def make_rental(owner, make_client):
    def _make(items, price="500.00", end_at=NOW + 30 * DAY, client=None, **overrides):
        payload = {
            "client_id": (client or make_client()).id,
            "items": items,
            "price": price,
            "start_at": NOW,
            "end_at": end_at,
        }
        payload.update(overrides)
        return RentalService.create_rental(owner.id, payload)

    return _make


@pytest.fixture
def auth_client(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"full_name": "Ana Souza", "email": "ana@example.com", "password": "secret123"},
    )
    assert response.status_code == 201
    return client
