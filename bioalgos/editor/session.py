"""Problem editor session with draft autosave.

A session moves ``clean -> dirty -> saved | discarded``. Every field change
overwrites the single global draft slot; the draft is restored when the
editor is reopened or becomes visible again for the same target, and is
removed on save, discard or delete.
"""
from __future__ import annotations

import logging
from enum import Enum

from bioalgos.client.notices import Notifier
from bioalgos.client.storage import DRAFT_KEY, StoreFacade
from bioalgos.common import utc_timestamp

from .form import ProblemForm

logger = logging.getLogger(__name__)


class PermissionDenied(Exception):
    """The current principal may not author problems."""


class EditorState(str, Enum):
    CLEAN = 'clean'
    DIRTY = 'dirty'
    SAVED = 'saved'
    DISCARDED = 'discarded'


class DraftStore:
    """The single draft slot. Not keyed per problem: the last writer wins."""

    def __init__(self, storage: StoreFacade, key: str = DRAFT_KEY):
        self.storage = storage
        self.key = key

    def save(self, problem_id, form: ProblemForm) -> dict:
        draft = {
            'problemId': problem_id,
            'fields': form.to_dict(),
            'timestamp': utc_timestamp(),
        }
        self.storage.write(self.key, draft)
        return draft

    def load(self) -> dict | None:
        draft = self.storage.read(self.key)
        return draft if isinstance(draft, dict) else None

    def clear(self) -> None:
        self.storage.remove(self.key)

    def load_for(self, problem_id) -> dict | None:
        """The stored draft if it targets *problem_id* (None for a new problem)."""
        draft = self.load()
        if draft is None:
            return None
        target = draft.get('problemId')
        if target is None or problem_id is None:
            return draft if target is None and problem_id is None else None
        return draft if str(target) == str(problem_id) else None


class ProblemEditorSession:
    def __init__(self, service, storage: StoreFacade, identity, problem_id=None,
                 notifier: Notifier = None):
        self.service = service
        self.identity = identity
        self.problem_id = problem_id
        self.drafts = DraftStore(storage)
        self.notifier = notifier or getattr(service, 'notifier', None) or Notifier()
        self.form = ProblemForm()
        self.state = EditorState.CLEAN
        self._persisted: dict | None = None

    @property
    def is_new(self) -> bool:
        return self.problem_id is None

    def _require_admin(self) -> None:
        if self.identity is None or not self.identity.is_admin:
            raise PermissionDenied('Admin privileges are required to edit problems')

    def _reset_form(self) -> None:
        if self._persisted is not None:
            self.form = ProblemForm.from_problem(self._persisted)
        else:
            self.form = ProblemForm()

    def open(self) -> ProblemForm:
        """Load the target Problem (or blank defaults), then apply any matching draft."""
        self._require_admin()
        self._persisted = None
        if not self.is_new:
            self._persisted = self.service.get_problem(self.problem_id)
            if self._persisted is None:
                logger.warning(f'Problem not found with ID: {self.problem_id}')
        self._reset_form()
        self.state = EditorState.CLEAN
        self.on_visible()
        return self.form

    def change(self, field: str, value) -> None:
        if field not in ProblemForm.field_names():
            raise KeyError(f'Unknown problem field: {field}')
        setattr(self.form, field, value)
        self.state = EditorState.DIRTY
        self.drafts.save(self.problem_id, self.form)

    def on_visible(self) -> bool:
        """Re-read the draft slot; overwrite the form if it targets this session."""
        draft = self.drafts.load_for(self.problem_id)
        if draft is None:
            return False
        self.form = ProblemForm.from_dict(draft.get('fields'))
        self.state = EditorState.DIRTY
        logger.debug(f'Restored draft from {draft.get("timestamp")}')
        return True

    def needs_leave_confirmation(self) -> bool:
        return self.state == EditorState.DIRTY

    def submit(self) -> dict | None:
        """Validate and persist the form. Returns the stored Problem."""
        self._require_admin()
        self.form.validate()

        if self.is_new:
            saved = self.service.create_problem(self.form.to_problem())
            self.notifier.success('Problem added successfully!')
        else:
            existing = self.service.get_problem(self.problem_id) or self._persisted
            record = self.form.to_problem(existing or {'id': self.problem_id})
            saved = self.service.update_problem(self.problem_id, record)
            if saved is None:
                self.notifier.error(f'Problem {self.problem_id} no longer exists')
                return None
            self.notifier.success('Problem updated successfully!')

        self.drafts.clear()
        self._persisted = saved
        self.problem_id = saved.get('id')
        self.state = EditorState.SAVED
        return saved

    def discard(self) -> ProblemForm:
        self.drafts.clear()
        self._reset_form()
        self.state = EditorState.DISCARDED
        return self.form

    def delete(self) -> bool:
        self._require_admin()
        if self.is_new:
            return False
        self.service.delete_problem(self.problem_id)
        self.drafts.clear()
        self._persisted = None
        self.state = EditorState.DISCARDED
        self.notifier.success('Problem deleted successfully!')
        return True
