"""Data access layer with remote/local fallback routing."""
from __future__ import annotations

import logging
import threading
import uuid

from bioalgos.common import SubmissionStatus, normalize, utc_timestamp

from .base import BaseStore
from .errors import TransportError
from .local import LocalStore
from .notices import Notifier
from .remote import RemoteStore

logger = logging.getLogger(__name__)

MODE_REMOTE = 'remote'
MODE_FALLBACK = 'fallback'

FALLBACK_NOTICE_ID = 'api-fallback'
FALLBACK_NOTICE = 'Using local data (API not available)'


class DataService:
    """Routes every logical operation to the remote API or the local store.

    The service probes the API once on construction. Any transport failure,
    at probe time or on a later call, switches it to fallback mode for the
    rest of its lifetime; the failed call is replayed against the local
    store. Results have the same shape on both paths.
    """

    def __init__(self, remote: RemoteStore, local: LocalStore,
                 notifier: Notifier = None, probe: bool = True):
        self.remote = remote
        self.local = local
        self.notifier = notifier or Notifier()
        self._mode = MODE_REMOTE
        self._mode_lock = threading.Lock()
        if probe:
            self.check_availability()

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def is_fallback(self) -> bool:
        return self._mode == MODE_FALLBACK

    def check_availability(self) -> bool:
        """Probe the API; a failed probe switches to fallback mode."""
        if self.is_fallback:
            return False
        if self.remote.probe():
            logger.info(f"API available at {self.remote.base_url}")
            return True
        self._switch_to_fallback('health probe failed')
        return False

    def _switch_to_fallback(self, reason: str) -> None:
        with self._mode_lock:
            if self._mode == MODE_FALLBACK:
                return
            self._mode = MODE_FALLBACK
        logger.warning(f"Switching to local fallback store: {reason}")
        self.notifier.info(FALLBACK_NOTICE, notice_id=FALLBACK_NOTICE_ID)

    def _active_store(self) -> BaseStore:
        return self.local if self.is_fallback else self.remote

    def _dispatch(self, collection: str, verb: str, *args):
        """Run ``verb`` on the active store, replaying locally on transport failure."""
        store = self._active_store()
        try:
            result = getattr(store, verb)(collection, *args)
        except TransportError as e:
            if store is self.local:
                raise
            self._switch_to_fallback(str(e))
            result = getattr(self.local, verb)(collection, *args)

        if verb == 'delete':
            return None
        if verb == 'list':
            return [normalize(collection, item) for item in result]
        return normalize(collection, result)

    # Problems

    def get_problems(self) -> list[dict]:
        return self._dispatch('problems', 'list')

    def get_problem(self, problem_id) -> dict | None:
        return self._dispatch('problems', 'get', problem_id)

    def get_problem_by_slug(self, slug: str) -> dict | None:
        return self._dispatch('problems', 'get_by_slug', slug)

    def create_problem(self, problem: dict) -> dict:
        return self._dispatch('problems', 'create', dict(problem))

    def update_problem(self, problem_id, problem: dict) -> dict | None:
        return self._dispatch('problems', 'update', problem_id, dict(problem))

    def delete_problem(self, problem_id) -> None:
        self._dispatch('problems', 'delete', problem_id)

    # Submissions

    def get_submissions(self) -> list[dict]:
        return self._dispatch('submissions', 'list')

    def create_submission(self, submission: dict) -> dict:
        record = dict(submission)
        status = record.get('status')
        if status not in {s.value for s in SubmissionStatus}:
            raise ValueError(f"Invalid submission status: {status!r}")
        if not record.get('id'):
            record['id'] = uuid.uuid4().hex
        if not record.get('timestamp'):
            record['timestamp'] = utc_timestamp()
        return self._dispatch('submissions', 'create', record)

    # Users

    def get_users(self) -> list[dict]:
        return self._dispatch('users', 'list')

    def get_user_by_id(self, user_id) -> dict | None:
        return self._dispatch('users', 'get', user_id)
