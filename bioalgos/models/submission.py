from bioalgos.common import normalize_submission
from bioalgos.extensions import db


class Submission(db.Model):
    """A solution attempt. Append-only.

    user_id and problem_id hold whatever JSON value the client sent (string or
    number) and are not foreign keys.
    """

    __tablename__ = 'submission'

    id = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.JSON, nullable=True)
    problem_id = db.Column(db.JSON, nullable=True)
    code = db.Column(db.Text, nullable=False, default='')
    language = db.Column(db.String(50), nullable=False, default='')
    status = db.Column(db.String(30), nullable=False)
    # ISO-8601 UTC instant, stored as sent so both paths render it identically
    timestamp = db.Column(db.String(40), nullable=False)

    def to_dict(self) -> dict:
        return normalize_submission({
            'id': self.id,
            'userId': self.user_id,
            'problemId': self.problem_id,
            'code': self.code,
            'language': self.language,
            'status': self.status,
            'timestamp': self.timestamp,
        })

    def __repr__(self) -> str:
        return f'<Submission {self.id} status={self.status!r}>'
