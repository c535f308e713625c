from datetime import datetime

from bioalgos.common import normalize_problem
from bioalgos.extensions import db


class Problem(db.Model):
    """A bioinformatics coding problem authored through the admin tooling."""

    __tablename__ = 'problem'

    id = db.Column(db.Integer, primary_key=True)
    # Derived from the title; not unique
    slug = db.Column(db.String(200), nullable=False, default='', index=True)
    title = db.Column(db.String(200), nullable=False, default='')
    difficulty = db.Column(db.String(20), nullable=False, default='medium')
    category = db.Column(db.String(100), nullable=False, default='')
    description = db.Column(db.Text, nullable=False, default='')
    examples = db.Column(db.JSON, nullable=True)
    constraints = db.Column(db.JSON, nullable=True)
    starter_code = db.Column(db.JSON, nullable=True)
    hints = db.Column(db.JSON, nullable=True)
    test_cases = db.Column(db.JSON, nullable=True)
    # Record keys without a column of their own, returned as sent
    extra = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # camelCase record key -> column attribute
    FIELD_MAP = {
        'slug': 'slug',
        'title': 'title',
        'difficulty': 'difficulty',
        'category': 'category',
        'description': 'description',
        'examples': 'examples',
        'constraints': 'constraints',
        'starterCode': 'starter_code',
        'hints': 'hints',
        'testCases': 'test_cases',
    }

    def apply_record(self, record: dict) -> None:
        """Full replace from a JSON record; absent fields reset to their defaults."""
        normalized = normalize_problem(record)
        for key, attr in self.FIELD_MAP.items():
            setattr(self, attr, normalized[key])
        self.extra = {
            k: v for k, v in normalized.items()
            if k != 'id' and k not in self.FIELD_MAP
        }

    def to_dict(self) -> dict:
        record = dict(self.extra or {})
        record['id'] = self.id
        for key, attr in self.FIELD_MAP.items():
            record[key] = getattr(self, attr)
        return normalize_problem(record)

    def __repr__(self) -> str:
        return f'<Problem {self.id} {self.title!r}>'
