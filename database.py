"""
Database configuration and initialization for the Academic Report Engine
"""

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
import functools
import sqlite3

from utils.errors import RepositoryError
from utils.logger import get_logger

log = get_logger('database')

# Initialize SQLAlchemy instance
db = SQLAlchemy()

@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def init_db(app):
    """Initialize database with application context"""
    with app.app_context():
        # Import all models to ensure they are registered
        from models import Branch, Student, Course, Grade, ScheduledReport

        # Create all tables
        db.create_all()

def reset_database(app):
    """Reset database - WARNING: This will delete all data"""
    with app.app_context():
        db.drop_all()
        db.create_all()

def handle_db_error(func):
    """Decorator translating data-access failures into RepositoryError"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as e:
            log.error("Database operation %s failed: %s", func.__name__, e)
            raise RepositoryError("Database operation failed", detail=func.__name__) from e
    return wrapper
