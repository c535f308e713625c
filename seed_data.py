"""Seed the API database with the sample problems and an optional admin account.
Run with: python seed_data.py [--admin-email EMAIL --admin-password PW]
"""
import argparse
import os
import sys
import uuid

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from bioalgos import create_app
from bioalgos.client.seed import sample_problems
from bioalgos.extensions import db
from bioalgos.models import Problem, User


def seed_problems():
    """Insert the sample problems unless the problem table already has rows.

    Returns the number of problems inserted.
    """
    existing_count = Problem.query.count()
    if existing_count > 0:
        print(f"Problem table already has {existing_count} entries. Skipping seed.")
        return 0

    samples = sample_problems()
    for record in samples:
        problem = Problem(id=record['id'])
        problem.apply_record(record)
        db.session.add(problem)
    db.session.commit()
    print(f"Seeded {len(samples)} sample problems.")
    for record in samples:
        print(f"  [{record['difficulty']}] {record['title']}")
    return len(samples)


def seed_admin(email, password, name='Admin'):
    """Create an admin account, or promote an existing one with that email."""
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(id=str(uuid.uuid4()), name=name, email=email)
        db.session.add(user)
    user.set_password(password)
    user.is_admin = True
    db.session.commit()
    print(f"Admin account ready: {email}")
    return user


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--env', default=None, help='Config name (development/production)')
    parser.add_argument('--admin-email', default=None)
    parser.add_argument('--admin-password', default=None)
    parser.add_argument('--admin-name', default='Admin')
    args = parser.parse_args(argv)

    if bool(args.admin_email) != bool(args.admin_password):
        parser.error('--admin-email and --admin-password must be given together')

    app = create_app(args.env)
    with app.app_context():
        seed_problems()
        if args.admin_email:
            seed_admin(args.admin_email, args.admin_password, name=args.admin_name)


if __name__ == '__main__':
    main()
