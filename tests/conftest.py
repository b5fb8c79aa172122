"""
Test configuration and fixtures.
"""
import pytest
import requests

from meetup import create_app, db
from meetup.models import User, Restaurant


@pytest.fixture
def app():
    """Application with a fresh in-memory database."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users(app):
    """Three conference attendees."""
    people = [
        User(username='ada', name='Ada Lovelace', email='ada@example.com'),
        User(username='grace', name='Grace Hopper', email='grace@example.com'),
        User(username='linus', name='Linus Torvalds', email='linus@example.com'),
    ]
    db.session.add_all(people)
    db.session.commit()
    return people


def make_restaurant(place_id, name, lat=40.7610, lng=-111.8900, **kwargs):
    restaurant = Restaurant(
        id=place_id,
        name=name,
        address=kwargs.pop('address', '1 Main St'),
        cuisine_type=kwargs.pop('cuisine_type', 'Restaurant'),
        price_level=kwargs.pop('price_level', 2),
        rating=kwargs.pop('rating', 4.0),
        lat=lat,
        lng=lng,
        **kwargs
    )
    db.session.add(restaurant)
    return restaurant


@pytest.fixture
def restaurants(app):
    """Two stored restaurants, A and B."""
    a = make_restaurant('place-a', 'Alpha Bistro')
    b = make_restaurant('place-b', 'Beta Noodles', lat=40.7650, lng=-111.8950)
    db.session.commit()
    return a, b


@pytest.fixture
def login(client):
    """Sign a user in by setting the session identity."""
    def _login(user):
        with client.session_transaction() as sess:
            sess['user_id'] = user.id
    return _login


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=''):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def fake_requests(monkeypatch):
    """
    Replace requests.get with a stub.

    Set stub.responses[url] to a FakeResponse or an exception to raise;
    every call is recorded in stub.calls as (url, params).
    """
    class Stub:
        def __init__(self):
            self.responses = {}
            self.calls = []

        def get(self, url, params=None, timeout=None, **kwargs):
            self.calls.append((url, params))
            response = self.responses.get(url)
            if response is None:
                raise AssertionError(f'Unexpected request to {url}')
            if isinstance(response, Exception):
                raise response
            return response

    stub = Stub()
    monkeypatch.setattr(requests, 'get', stub.get)
    return stub
