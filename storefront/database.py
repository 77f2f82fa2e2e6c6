# storefront/database.py
import logging
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

logger = logging.getLogger(__name__)


class Database:
    """
    Handle around the single SQLite file store.

    Lifecycle:
      - constructed with a URL (nothing is opened yet)
      - open()   : create the engine and the tables
      - close()  : dispose the engine (called on shutdown)

    The handle lives on `app.state.db` and reaches routes through
    `get_session`, so no module-level engine exists.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine = None

    def open(self) -> None:
        if self.engine is not None:
            return

        connect_args = {}
        kwargs = {}
        if self.url.startswith("sqlite"):
            # Routes run in a thread pool; SQLite connections must be shareable.
            connect_args["check_same_thread"] = False
            if ":memory:" in self.url:
                # One connection, otherwise every checkout sees an empty DB.
                kwargs["poolclass"] = StaticPool

        self.engine = create_engine(
            self.url,
            echo=self.echo,  # set to True if you want to debug SQL queries
            connect_args=connect_args,
            **kwargs,
        )
        self.create_db_and_tables()

    def create_db_and_tables(self) -> None:
        """
        Create all tables defined in SQLModel metadata if they do not exist.
        """
        # Import models so SQLModel metadata is populated before create_all()
        from storefront.models import cart as _cart_models  # noqa: F401
        from storefront.models import contact as _contact_models  # noqa: F401
        from storefront.models import user as _user_models  # noqa: F401

        SQLModel.metadata.create_all(self.require_engine())

    def require_engine(self):
        if self.engine is None:
            raise RuntimeError("Database is not open. Call open() first.")
        return self.engine

    def session(self) -> Session:
        return Session(self.require_engine())

    def is_connected(self) -> bool:
        """Ping the store with `SELECT 1`; used by the health endpoint."""
        if self.engine is None:
            return False
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.warning("Database ping failed: %s", exc)
            return False

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None


def get_session(request: Request) -> Iterator[Session]:
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    db: Database = request.app.state.db
    with db.session() as session:
        yield session
