from .problem import Problem
from .submission import Submission
from .user import User

__all__ = [
    'Problem',
    'Submission',
    'User',
]
