"""Shared test fixtures for the BioAlgos test suite."""

from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from bioalgos import create_app
from bioalgos.client import DataService, LocalStore, MemoryStore, Notifier, RemoteStore, StoreFacade
from bioalgos.extensions import db as _db

API_URL = 'http://api.test/api'
DEAD_API_URL = 'http://unreachable.test/api'


class FlaskClientAdapter(BaseAdapter):
    """Route requests through a Flask test client instead of the network."""

    def __init__(self, client):
        super().__init__()
        self.client = client

    def send(self, request, **kwargs):
        parts = urlsplit(request.url)
        path = parts.path + (f'?{parts.query}' if parts.query else '')
        headers = {
            k: v for k, v in request.headers.items()
            if k.lower() not in ('content-length', 'content-type')
        }
        flask_resp = self.client.open(
            path,
            method=request.method,
            data=request.body,
            headers=headers,
            content_type=request.headers.get('Content-Type'),
        )

        resp = requests.Response()
        resp.status_code = flask_resp.status_code
        resp.reason = flask_resp.status.partition(' ')[2]
        resp._content = flask_resp.get_data()
        resp.headers = CaseInsensitiveDict(dict(flask_resp.headers))
        resp.url = request.url
        resp.request = request
        resp.encoding = 'utf-8'
        return resp

    def close(self):
        pass


class DeadAdapter(BaseAdapter):
    """Every request fails as if the host were unreachable."""

    def __init__(self):
        super().__init__()
        self.calls = 0

    def send(self, request, **kwargs):
        self.calls += 1
        raise requests.ConnectionError(f'Connection refused: {request.url}')

    def close(self):
        pass


@pytest.fixture()
def app():
    """Create a Flask application configured for testing."""
    application = create_app('testing')
    yield application


@pytest.fixture()
def db(app):
    """Provide a clean database for each test."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def client(app, db):
    """Provide a Flask test client."""
    return app.test_client()


@pytest.fixture()
def storage():
    """An empty in-memory local store behind the JSON facade."""
    return StoreFacade(MemoryStore())


@pytest.fixture()
def notifier():
    notices = []
    n = Notifier()
    n.subscribe(lambda level, message: notices.append((level, message)))
    n.received = notices
    return n


@pytest.fixture()
def api_remote(client):
    """A RemoteStore talking to the test app."""
    remote = RemoteStore(API_URL)
    remote.session.mount('http://api.test/', FlaskClientAdapter(client))
    return remote


@pytest.fixture()
def dead_remote():
    """A RemoteStore whose every request fails at the transport level."""
    remote = RemoteStore(DEAD_API_URL)
    remote.adapter = DeadAdapter()
    remote.session.mount('http://unreachable.test/', remote.adapter)
    return remote


@pytest.fixture()
def online_service(api_remote, storage, notifier):
    return DataService(api_remote, LocalStore(storage), notifier=notifier)


@pytest.fixture()
def offline_service(dead_remote, storage, notifier):
    return DataService(dead_remote, LocalStore(storage), notifier=notifier)


class FakeIdentity:
    """Minimal principal holder for editor tests."""

    def __init__(self, is_admin=True):
        self.is_admin = is_admin
        self.user = None


@pytest.fixture()
def admin_identity():
    return FakeIdentity(is_admin=True)
