"""
Database configuration for the local roll store
"""

from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()
migrate = Migrate()


def init_db():
    """Create the roll store tables"""
    db.create_all()


def init_app(app):
    """Initialize database extensions with Flask app"""
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so they're registered with SQLAlchemy before create_all
    from voter_desk.database import models  # noqa: F401
