import logging
import uuid

from flask import Blueprint, jsonify, request

from bioalgos.common import SubmissionStatus, utc_timestamp
from bioalgos.extensions import db
from bioalgos.models import Problem, Submission, User

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__, url_prefix='/api')


def _json_body():
    """Return the request JSON object, or None if the body is not an object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data


def _int_or_none(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _not_found():
    return jsonify({'error': 'Not found'}), 404


def _bad_request(message):
    return jsonify({'error': message}), 400


def _get_problem(problem_id):
    pk = _int_or_none(problem_id)
    if pk is None:
        return None
    return db.session.get(Problem, pk)


@api_bp.route('/health')
def health():
    return jsonify({'status': 'ok'})


# Problems

@api_bp.route('/problems', methods=['GET'])
def list_problems():
    problems = Problem.query.order_by(Problem.id).all()
    return jsonify([p.to_dict() for p in problems])


@api_bp.route('/problems', methods=['POST'])
def create_problem():
    data = _json_body()
    if data is None:
        return _bad_request('Request body must be a JSON object')

    problem = Problem()
    requested_id = data.get('id')
    if requested_id is not None:
        pk = _int_or_none(requested_id)
        if pk is None:
            return _bad_request('Problem id must be an integer')
        if db.session.get(Problem, pk) is not None:
            return jsonify({'error': f'Problem {pk} already exists'}), 409
        problem.id = pk

    problem.apply_record(data)
    db.session.add(problem)
    db.session.commit()
    logger.info(f'Created problem {problem.id} ({problem.slug})')
    return jsonify(problem.to_dict()), 201


@api_bp.route('/problems/<problem_id>', methods=['GET'])
def get_problem(problem_id):
    problem = _get_problem(problem_id)
    if problem is None:
        return _not_found()
    return jsonify(problem.to_dict())


@api_bp.route('/problems/slug/<slug>', methods=['GET'])
def get_problem_by_slug(slug):
    problem = Problem.query.filter_by(slug=slug).order_by(Problem.id).first()
    if problem is None:
        return _not_found()
    return jsonify(problem.to_dict())


@api_bp.route('/problems/<problem_id>', methods=['PUT'])
def update_problem(problem_id):
    data = _json_body()
    if data is None:
        return _bad_request('Request body must be a JSON object')
    problem = _get_problem(problem_id)
    if problem is None:
        return _not_found()

    problem.apply_record(data)
    db.session.commit()
    logger.info(f'Updated problem {problem.id}')
    return jsonify(problem.to_dict())


@api_bp.route('/problems/<problem_id>', methods=['DELETE'])
def delete_problem(problem_id):
    problem = _get_problem(problem_id)
    if problem is None:
        return _not_found()
    db.session.delete(problem)
    db.session.commit()
    logger.info(f'Deleted problem {problem_id}')
    return '', 204


# Submissions

@api_bp.route('/submissions', methods=['GET'])
def list_submissions():
    subs = Submission.query.order_by(Submission.timestamp).all()
    return jsonify([s.to_dict() for s in subs])


@api_bp.route('/submissions', methods=['POST'])
def create_submission():
    data = _json_body()
    if data is None:
        return _bad_request('Request body must be a JSON object')

    status = data.get('status')
    valid = {s.value for s in SubmissionStatus}
    if status not in valid:
        return _bad_request(f'Invalid status: {status!r}')

    sub_id = str(data.get('id') or uuid.uuid4().hex)
    if db.session.get(Submission, sub_id) is not None:
        return jsonify({'error': f'Submission {sub_id} already exists'}), 409

    submission = Submission(
        id=sub_id,
        user_id=data.get('userId'),
        problem_id=data.get('problemId'),
        code=data.get('code') or '',
        language=data.get('language') or '',
        status=status,
        timestamp=data.get('timestamp') or utc_timestamp(),
    )
    db.session.add(submission)
    db.session.commit()
    return jsonify(submission.to_dict()), 201


# Users

@api_bp.route('/users', methods=['GET'])
def list_users():
    users = User.query.order_by(User.email).all()
    return jsonify([u.to_dict() for u in users])


@api_bp.route('/users/<user_id>', methods=['GET'])
def get_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        return _not_found()
    return jsonify(user.to_dict())
