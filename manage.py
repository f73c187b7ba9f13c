# manage.py
import sys

from app import create_app
from src.database.db_manager import User, db


def create_db():
    """Creates the database tables."""
    app = create_app()
    with app.app_context():
        db.create_all()
        print(f"Database tables created at {app.config['SQLALCHEMY_DATABASE_URI']}")


def issue_token(user_id: str):
    """Print a signed bearer token for an existing user (development helper)."""
    app = create_app()
    with app.app_context():
        try:
            user = db.session.get(User, int(user_id))
        except ValueError:
            user = None
        if user is None:
            print(f"No user with id {user_id}")
            sys.exit(1)
        token = app.extensions['account_service'].issue_token(user.id)
        print(token)


USAGE = "Usage: python manage.py create_db | issue_token <user_id>"


if __name__ == '__main__':
    if len(sys.argv) < 2:
        print(f"No command provided. {USAGE}")
        sys.exit(1)
    command = sys.argv[1]
    if command == 'create_db':
        create_db()
    elif command == 'issue_token' and len(sys.argv) == 3:
        issue_token(sys.argv[2])
    else:
        print(f"Unknown command: {' '.join(sys.argv[1:])}")
        print(USAGE)
        sys.exit(1)
