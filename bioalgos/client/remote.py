from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from .base import BaseStore
from .errors import ConflictError, TransportError

logger = logging.getLogger(__name__)


class RemoteStore(BaseStore):
    """REST/JSON client for the BioAlgos API. Holds no state besides its session."""

    NAME = "remote"

    def __init__(self, base_url: str, timeout: float = 5.0, probe_timeout: float = 2.0,
                 session: requests.Session = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })
        return session

    def _url(self, *parts) -> str:
        return '/'.join([self.base_url] + [quote(str(p), safe='') for p in parts])

    def _request(self, method, url, timeout=None, allow_404=False, **kwargs):
        """Send one request.

        With ``allow_404`` a 404 answer returns None instead of raising, since
        the server was reached and reported the record as absent. A 409 raises
        ConflictError; every other failure raises TransportError.
        """
        try:
            resp = self.session.request(method, url, timeout=timeout or self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"API request {method} {url} failed: {e}")
            raise TransportError(f"{method} {url} failed: {e}") from e

        if allow_404 and resp.status_code == 404:
            return None
        if resp.status_code == 409:
            logger.info(f"API rejected {method} {url}: id already taken")
            raise ConflictError(f"Conflict: {method} {url}")
        if not resp.ok:
            logger.warning(f"API error {resp.status_code} for {method} {url}")
            raise TransportError(
                f"API error: {resp.status_code} {resp.reason}",
                status_code=resp.status_code,
            )
        return resp

    def _json(self, resp):
        if resp is None:
            return None
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"Malformed JSON from {resp.url}: {e}") from e

    def probe(self, timeout: float = None) -> bool:
        """Liveness check against ``GET /health``."""
        try:
            self._request('GET', self._url('health'), timeout=timeout or self.probe_timeout)
            return True
        except TransportError:
            return False

    def list(self, collection):
        data = self._json(self._request('GET', self._url(collection)))
        if not isinstance(data, list):
            raise TransportError(f"Expected a list from /{collection}, got {type(data).__name__}")
        return data

    def get(self, collection, key):
        return self._json(self._request('GET', self._url(collection, key), allow_404=True))

    def get_by_slug(self, collection, slug):
        return self._json(
            self._request('GET', self._url(collection, 'slug', slug), allow_404=True)
        )

    def create(self, collection, record):
        return self._json(self._request('POST', self._url(collection), json=record))

    def update(self, collection, key, record):
        return self._json(
            self._request('PUT', self._url(collection, key), json=record, allow_404=True)
        )

    def delete(self, collection, key):
        self._request('DELETE', self._url(collection, key), allow_404=True)
