"""Engine and transaction handling for the analysis tables."""

import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .models import AnalysisRecordModel, Base


logger = logging.getLogger(__name__)

DATABASE_URL_ENV = "DOC_RISK_DATABASE_URL"

# (url part, environment variable, default)
_POSTGRES_PARTS = (
    ("host", "POSTGRES_HOST", "localhost"),
    ("port", "POSTGRES_PORT", "5432"),
    ("database", "POSTGRES_DB", "deal_doc_risk"),
    ("user", "POSTGRES_USER", "postgres"),
    ("password", "POSTGRES_PASSWORD", "postgres"),
)


def get_database_url(environ: Optional[Mapping[str, str]] = None, **parts: Any) -> str:
    """
    Resolve the analysis database URL.

    DOC_RISK_DATABASE_URL wins when no explicit parts are passed. Otherwise
    a PostgreSQL URL is assembled from the given parts, falling back to the
    POSTGRES_* variables and then to local defaults.

    Args:
        environ: Environment mapping (os.environ if None).
        **parts: Any of host, port, database, user, password.
    """
    env = os.environ if environ is None else environ
    explicit = env.get(DATABASE_URL_ENV)
    if explicit and not any(parts.values()):
        return explicit

    values = {
        name: parts.get(name) or env.get(variable, default)
        for name, variable, default in _POSTGRES_PARTS
    }
    return "postgresql://{user}:{password}@{host}:{port}/{database}".format(**values)


class DatabaseManager:
    """
    Owns the engine and session factory behind SqlAnalysisStore.

    The engine is created on first use. SQLite URLs get a plain engine that
    may be shared across worker threads; server databases get a pre-pinged
    connection pool.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        self.url = database_url or get_database_url()
        self._pool_options = {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_pre_ping": True,
        }
        self._echo = echo
        self._engine: Optional[Engine] = None
        self._sessions: Optional[sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.url).get_backend_name() == "sqlite"

    def _engine_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"echo": self._echo}
        if self.is_sqlite:
            options["connect_args"] = {"check_same_thread": False}
        else:
            options.update(self._pool_options)
        return options

    def _connect(self) -> sessionmaker:
        """Create the engine and session factory on first use."""
        if self._engine is None:
            self._engine = create_engine(self.url, **self._engine_options())
            self._sessions = sessionmaker(
                bind=self._engine, autoflush=False, expire_on_commit=False
            )
            safe_url = make_url(self.url).render_as_string(hide_password=True)
            logger.info(f"Opened analysis database {safe_url}")
        return self._sessions

    @property
    def engine(self) -> Engine:
        self._connect()
        return self._engine

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Yield a session inside a transaction.

        Committed when the block exits normally, rolled back if it raises.
        """
        with self._connect().begin() as session:
            yield session

    def ensure_schema(self) -> bool:
        """
        Create the document_analyses table if it does not exist.

        Returns:
            True if the table was created by this call.
        """
        table = AnalysisRecordModel.__table__
        if inspect(self.engine).has_table(table.name):
            return False
        Base.metadata.create_all(self.engine, tables=[table])
        logger.info(f"Created table '{table.name}'")
        return True

    def ping(self) -> bool:
        """Check the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Analysis database unreachable: {e}")
            return False
        return True

    def dispose(self) -> None:
        """Release pooled connections; the engine is rebuilt on next use."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._sessions = None
