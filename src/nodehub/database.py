"""
SQLModel persistence for nodehub.

NodeDatabase implements both NodeStore and ClientStore over three tables:
`nodes`, `users` and `node_clients`. Clients reference nodes by id without
a foreign-key constraint, so a client may outlive its node.
"""

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, create_engine, select

from nodehub.errors import StoreError
from nodehub.logger import get_logger
from nodehub.nodes.base import ClientStore, NodeStore
from nodehub.nodes.models import DEFAULT_NODE_TYPE, ClientOwner, ClientRecord, Node

logger = get_logger(__name__)


# ─── Tables ──────────────────────────────────────────────────────────


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NodeModel(SQLModel, table=True):
    __tablename__ = "nodes"

    # Insertion order; nodes are listed by it
    seq: Optional[int] = Field(default=None, primary_key=True)
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), unique=True, index=True)
    name: str
    type: str = Field(default=DEFAULT_NODE_TYPE)
    host: Optional[str] = None
    access_url: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class UserModel(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str
    email: Optional[str] = None


class NodeClientModel(SQLModel, table=True):
    __tablename__ = "node_clients"

    id: Optional[int] = Field(default=None, primary_key=True)
    node_id: str = Field(index=True)
    user_id: Optional[str] = Field(default=None, index=True)
    name: str = ""
    created_at: datetime = Field(default_factory=_utcnow)


def _to_node(row: NodeModel) -> Node:
    return Node(**row.model_dump())


# ─── Database ────────────────────────────────────────────────────────


class NodeDatabase(NodeStore, ClientStore):
    """
    SQLModel-backed node and client storage.

    Args:
        database: SQLAlchemy URL, or a filesystem path for an SQLite file.
    """

    def __init__(self, database: str | Path):
        url = str(database)
        if "://" not in url:
            url = f"sqlite:///{url}"

        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
            path = url.split(":///", 1)[-1]
            if path and path != ":memory:":
                Path(path).parent.mkdir(parents=True, exist_ok=True)

        self.url = url
        self.engine = create_engine(url, connect_args=connect_args)
        SQLModel.metadata.create_all(self.engine)
        logger.debug(f"Database ready: {url}")

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Open a session; storage failures surface as StoreError."""
        try:
            with Session(self.engine) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Database error: {e}")
            raise StoreError(str(e)) from e

    def ping(self) -> bool:
        """Run a trivial query to confirm the database is reachable."""
        with self._session() as session:
            session.exec(select(NodeModel.id).limit(1)).first()
        return True

    # ─── NodeStore ───────────────────────────────────────────────────

    def _find(self, session: Session, node_id: str) -> NodeModel | None:
        return session.exec(select(NodeModel).where(NodeModel.id == node_id)).first()

    def list_all(self) -> list[Node]:
        with self._session() as session:
            stmt = select(NodeModel).order_by(NodeModel.seq)
            return [_to_node(row) for row in session.exec(stmt).all()]

    def get_node(self, node_id: str) -> Node | None:
        with self._session() as session:
            row = self._find(session, node_id)
            return _to_node(row) if row else None

    def create_node(self, fields: dict[str, Any]) -> Node:
        with self._session() as session:
            row = NodeModel(**fields)
            session.add(row)
            session.commit()
            session.refresh(row)
            return _to_node(row)

    def update_node(self, node_id: str, changes: dict[str, Any]) -> Node | None:
        with self._session() as session:
            row = self._find(session, node_id)
            if not row:
                return None

            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = _utcnow()

            session.add(row)
            session.commit()
            session.refresh(row)
            return _to_node(row)

    def delete_node(self, node_id: str) -> bool:
        with self._session() as session:
            row = self._find(session, node_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True

    # ─── ClientStore ─────────────────────────────────────────────────

    def list_all_with_owners(self) -> list[ClientRecord]:
        with self._session() as session:
            stmt = (
                select(NodeClientModel, UserModel)
                .join(
                    UserModel,
                    NodeClientModel.user_id == UserModel.id,
                    isouter=True,
                )
                .order_by(NodeClientModel.id)
            )
            records = []
            for client, user in session.exec(stmt).all():
                records.append(
                    ClientRecord(
                        id=client.id,
                        node_id=client.node_id,
                        user_id=client.user_id,
                        name=client.name,
                        created_at=client.created_at,
                        user=ClientOwner(**user.model_dump()) if user else None,
                    )
                )
            return records

    # ─── Client / user writes (owned by other services, used for seeding) ─

    def create_user(self, name: str, email: str | None = None) -> str:
        """Insert a user and return its id."""
        with self._session() as session:
            user = UserModel(name=name, email=email)
            session.add(user)
            session.commit()
            return user.id

    def add_client(self, node_id: str, name: str = "", user_id: str | None = None) -> int:
        """Insert a client for a node and return its id."""
        with self._session() as session:
            client = NodeClientModel(node_id=node_id, name=name, user_id=user_id)
            session.add(client)
            session.commit()
            session.refresh(client)
            return client.id


_database: NodeDatabase | None = None


def get_database() -> NodeDatabase:
    """Return the process-wide database, creating it from CONFIG on first use."""
    global _database
    if _database is None:
        from nodehub.config import CONFIG

        _database = NodeDatabase(CONFIG.database_url)
    return _database
