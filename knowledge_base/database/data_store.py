"""
Data Store

Database operations for users, chat history and document chunks.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

from loguru import logger
from pydantic import BaseModel
from sqlalchemy import desc, insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DisconnectionError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from knowledge_base.core.config import Settings, settings as default_settings
from knowledge_base.core.database import get_engine
from knowledge_base.core.errors import ConstraintViolation, DataStoreError, TransportError
from knowledge_base.core.security import build_password_context, hash_password, pwd_context
from knowledge_base.models.chat import Chat
from knowledge_base.models.chunk import Chunk
from knowledge_base.models.user import User

Record = Union[BaseModel, Dict[str, Any]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_dict(record: Record) -> Dict[str, Any]:
    # Explicit nulls are part of the record and must survive the round trip
    if isinstance(record, BaseModel):
        return record.model_dump()
    return dict(record)


class DataStore:
    """Facade over the relational database used by the chat application"""

    def __init__(
        self,
        engine: Engine,
        atomic_upsert: Optional[bool] = None,
        clock: Optional[Callable[[], datetime]] = None,
        bcrypt_rounds: Optional[int] = None
    ):
        self.engine = engine
        self.atomic_upsert = default_settings.atomic_chat_upsert if atomic_upsert is None else atomic_upsert
        self.clock = clock or _utcnow
        self.pwd_context = pwd_context if bcrypt_rounds is None else build_password_context(bcrypt_rounds)
        self.SessionLocal = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings = None) -> "DataStore":
        """Build a store on the process-wide engine"""
        settings = settings or default_settings
        return cls(
            get_engine(settings),
            atomic_upsert=settings.atomic_chat_upsert,
            bcrypt_rounds=settings.bcrypt_rounds
        )

    @contextmanager
    def session(self, operation: str) -> Iterator[Session]:
        """
        Open a session for one operation, translating driver failures

        A connection is checked out before the operation runs. Failing to get
        one, or losing it midway, is a TransportError; any other driver error
        (missing table, bad SQL) is a plain DataStoreError.

        Args:
            operation: Operation name used in log messages

        Yields:
            SQLAlchemy Session, closed on exit
        """
        db = self.SessionLocal()
        connected = False
        try:
            db.connection()
            connected = True
            yield db
        except IntegrityError as e:
            logger.error(f"Constraint violation in {operation}: {e.orig}")
            db.rollback()
            raise ConstraintViolation(str(e.orig), orig=e) from e
        except (InterfaceError, DisconnectionError) as e:
            logger.error(f"Database transport error in {operation}: {e}")
            db.rollback()
            raise TransportError(str(e), orig=e) from e
        except OperationalError as e:
            db.rollback()
            if not connected or e.connection_invalidated:
                logger.error(f"Database transport error in {operation}: {e}")
                raise TransportError(str(e), orig=e) from e
            logger.error(f"Database error in {operation}: {e.orig}")
            raise DataStoreError(str(e.orig), orig=e) from e
        except Exception as e:
            logger.error(f"Error in {operation}: {e}")
            db.rollback()
            raise
        finally:
            db.close()

    # Users

    def get_user(self, email: str) -> List[User]:
        """
        Get users by exact email match

        Args:
            email: User email

        Returns:
            List of matching User objects (empty when none)
        """
        with self.session("get_user") as db:
            return db.query(User).filter(User.email == email).all()

    def create_user(self, email: str, password: str) -> User:
        """
        Create a user with a salted hash of the password

        Args:
            email: User email, must not exist yet
            password: Plaintext password

        Returns:
            Created User object

        Raises:
            ConstraintViolation: If the email is already registered
        """
        user = User(email=email, password=hash_password(password, self.pwd_context))

        with self.session("create_user") as db:
            db.add(user)
            db.commit()
            db.refresh(user)

        logger.info(f"Created user {email}")
        return user

    # Chats

    def _upsert_statement(self, values: Dict[str, Any]):
        dialect = self.engine.dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert as dialect_insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert as dialect_insert
        else:
            return None

        statement = dialect_insert(Chat).values(**values)
        # author and created_at keep their first-insert values
        return statement.on_conflict_do_update(
            index_elements=[Chat.id],
            set_={"messages": statement.excluded.messages}
        )

    def create_message(self, chat_id: str, messages: Iterable[Record], author: str) -> Chat:
        """
        Create a chat or replace the messages of an existing one

        Args:
            chat_id: Client supplied chat ID
            messages: Message history (Message schemas or dicts)
            author: Email of the chat owner, used only when the chat is new

        Returns:
            Stored Chat object
        """
        payload = [_as_dict(message) for message in messages]
        values = {
            "id": chat_id,
            "author": author,
            "messages": payload,
            "created_at": self.clock(),
        }

        with self.session("create_message") as db:
            statement = self._upsert_statement(values) if self.atomic_upsert else None

            if statement is not None:
                db.execute(statement)
            else:
                # Read-then-write: two concurrent first writes for one ID race,
                # and the loser fails on the primary key
                existing = db.query(Chat).filter(Chat.id == chat_id).first()
                if existing:
                    existing.messages = payload
                else:
                    db.add(Chat(**values))

            db.commit()
            db.expire_all()
            chat = db.get(Chat, chat_id)

        logger.info(f"Saved {len(payload)} messages for chat {chat_id}")
        return chat

    def get_chats_by_user(self, email: str) -> List[Chat]:
        """
        Get all chats of a user, newest first

        Args:
            email: Author email

        Returns:
            List of Chat objects ordered by created_at descending
        """
        with self.session("get_chats_by_user") as db:
            return db.query(Chat).filter(
                Chat.author == email
            ).order_by(desc(Chat.created_at)).all()

    def get_chat_by_id(self, chat_id: str) -> Optional[Chat]:
        with self.session("get_chat_by_id") as db:
            return db.query(Chat).filter(Chat.id == chat_id).first()

    # Chunks

    def insert_chunks(self, chunks: Iterable[Record]) -> int:
        """
        Bulk insert chunks in a single statement

        Args:
            chunks: ChunkCreate schemas or dicts with id, file_path, content, embedding

        Returns:
            Number of inserted rows (0 for empty input, which skips the database)
        """
        rows = [_as_dict(chunk) for chunk in chunks]
        if not rows:
            logger.debug("No chunks to insert")
            return 0

        with self.session("insert_chunks") as db:
            db.execute(insert(Chunk), rows)
            db.commit()

        logger.info(f"Inserted {len(rows)} chunks")
        return len(rows)

    def get_chunks_by_file_paths(self, file_paths: Iterable[str]) -> List[Chunk]:
        """
        Get chunks belonging to any of the given files

        Args:
            file_paths: File paths to match

        Returns:
            List of Chunk objects in storage order
        """
        paths = list(file_paths)
        if not paths:
            return []

        with self.session("get_chunks_by_file_paths") as db:
            chunks = db.query(Chunk).filter(Chunk.file_path.in_(paths)).all()

        logger.debug(f"Fetched {len(chunks)} chunks for {len(paths)} file paths")
        return chunks

    def delete_chunks_by_file_path(self, file_path: str) -> int:
        """
        Delete every chunk of a file

        Args:
            file_path: Exact file path

        Returns:
            Number of deleted rows
        """
        with self.session("delete_chunks_by_file_path") as db:
            deleted = db.query(Chunk).filter(
                Chunk.file_path == file_path
            ).delete(synchronize_session=False)
            db.commit()

        logger.info(f"Deleted {deleted} chunks for {file_path}")
        return deleted
