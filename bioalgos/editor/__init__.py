from .form import ProblemForm, ValidationError
from .session import DraftStore, EditorState, PermissionDenied, ProblemEditorSession

__all__ = [
    'DraftStore',
    'EditorState',
    'PermissionDenied',
    'ProblemEditorSession',
    'ProblemForm',
    'ValidationError',
]
