"""
Database module - relational (SQLAlchemy) and MongoDB connections.
"""
from admin_console.db.postgres import get_db_session, execute_raw_sql, test_postgres_connection
from admin_console.db.mongodb import get_mongo_db, test_mongo_connection
from admin_console.db.tables import init_db

__all__ = [
    "get_db_session",
    "execute_raw_sql",
    "test_postgres_connection",
    "get_mongo_db",
    "test_mongo_connection",
    "init_db",
]
