"""Record shapes shared by the REST backend and the client data layer.

Both storage paths hand out plain JSON dicts with camelCase keys; the helpers
here are the single place where optional-field defaults are applied so that a
record read from the API and one read from the local store look the same.
"""
from __future__ import annotations

import copy
import re
from datetime import datetime, timezone
from enum import Enum


class Difficulty(str, Enum):
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'


class SubmissionStatus(str, Enum):
    ACCEPTED = 'accepted'
    WRONG_ANSWER = 'wrong_answer'
    TIME_LIMIT_EXCEEDED = 'time_limit_exceeded'
    RUNTIME_ERROR = 'runtime_error'


# Category keys offered by the problem editor
CATEGORIES = {
    'graph-algorithms': 'Graph Algorithms',
    'tree-data-structures': 'Tree Data Structures',
    'search-algorithms': 'Search Algorithms',
    'dynamic-programming': 'Dynamic Programming',
    'machine-learning': 'Machine Learning',
    'combinatorial-algorithms': 'Combinatorial Algorithms',
}

# Optional Problem fields and the value a missing field reads as
_PROBLEM_DEFAULTS = {
    'slug': '',
    'title': '',
    'difficulty': Difficulty.MEDIUM.value,
    'category': '',
    'description': '',
    'examples': [],
    'constraints': [],
    'starterCode': {},
    'hints': [],
    'testCases': [],
}

_USER_DEFAULTS = {
    'name': '',
    'email': '',
    'isAdmin': False,
    'lastActivity': None,
}

_SUBMISSION_DEFAULTS = {
    'userId': None,
    'problemId': None,
    'code': '',
    'language': '',
    'status': None,
    'timestamp': None,
}


def slugify(title: str) -> str:
    """Derive a URL slug: lowercase, whitespace runs to '-', drop non-word chars."""
    slug = re.sub(r'\s+', '-', (title or '').lower())
    return re.sub(r'[^\w-]+', '', slug)


def utc_timestamp(dt: datetime | None = None) -> str:
    """ISO-8601 UTC instant with a trailing 'Z' (millisecond precision)."""
    dt = dt or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime('%Y-%m-%dT%H:%M:%S.') + f'{dt.microsecond // 1000:03d}Z'


def epoch_millis(dt: datetime | None = None) -> int:
    dt = dt or datetime.now(timezone.utc)
    return int(dt.timestamp() * 1000)


def _with_defaults(record: dict, defaults: dict) -> dict:
    result = dict(record)
    for key, default in defaults.items():
        if result.get(key) is None and default is not None:
            result[key] = copy.deepcopy(default)
        else:
            result.setdefault(key, default)
    return result


def normalize_problem(record: dict | None) -> dict | None:
    if record is None:
        return None
    result = _with_defaults(record, _PROBLEM_DEFAULTS)
    result['examples'] = [
        {
            'input': ex.get('input', ''),
            'output': ex.get('output', ''),
            **({'explanation': ex['explanation']} if ex.get('explanation') is not None else {}),
        }
        for ex in result['examples']
    ]
    return result


def normalize_user(record: dict | None) -> dict | None:
    if record is None:
        return None
    result = _with_defaults(record, _USER_DEFAULTS)
    # Credentials never leave the storage layer
    result.pop('password', None)
    result.pop('passwordHash', None)
    result['isAdmin'] = bool(result['isAdmin'])
    return result


def normalize_submission(record: dict | None) -> dict | None:
    if record is None:
        return None
    return _with_defaults(record, _SUBMISSION_DEFAULTS)


NORMALIZERS = {
    'problems': normalize_problem,
    'submissions': normalize_submission,
    'users': normalize_user,
}


def normalize(collection: str, record: dict | None) -> dict | None:
    """Apply the collection's optional-field defaults to *record*."""
    normalizer = NORMALIZERS.get(collection)
    if normalizer is None:
        return record
    return normalizer(record)
