import logging

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from models.base_model import Base

logger = logging.getLogger(__name__)


class DBStorage:
    """Engine + scoped session wrapper handed to every service."""

    __engine = None
    __session = None

    def __init__(self, database_url, echo=False):
        """Initialize engine for the given database URL"""
        engine_kwargs = {"echo": echo, "future": True}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # in-memory databases must share one connection across the pool
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True

        self.__engine = create_engine(database_url, **engine_kwargs)

        # Enable SQLite foreign keys (needed for ON DELETE RESTRICT/CASCADE)
        if self.__engine.url.get_backend_name() == "sqlite":
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    @property
    def engine(self):
        return self.__engine

    def reload(self):
        """Create tables and start session"""
        # importing the package registers every model on Base.metadata
        import models  # noqa: F401

        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)
        logger.debug("Database ready at %s", self.__engine.url.render_as_string(hide_password=True))

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def rollback(self):
        self.__session.rollback()

    def delete(self, obj=None):
        """Delete object if exists (hard delete)"""
        if obj is not None:
            self.__session.delete(obj)

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if id is None:
            return None
        return self.__session.get(cls, id)

    def count(self, cls, *criteria):
        """Count rows of cls matching the optional criteria"""
        return self.__session.query(cls).filter(*criteria).count()

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    # expose the SQLAlchemy session for advanced querying (joins, filters, etc.)
    def get_session(self):
        return self.__session
