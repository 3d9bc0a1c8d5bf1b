import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Tuple

from ...core.errors import ConflictError
from ...domain.models import Category, Currency, Frequency, Subscription, SubscriptionStatus, User
from ...domain.ports.persistence import PersistenceGateway


class SQLiteSession:
    """Transaction scope over the shared connection.

    The gateway lock is held from :meth:`start_transaction` until the
    transaction is committed or aborted, so other requests only ever observe
    the state before or after the whole unit of work.
    """

    def __init__(self, conn: sqlite3.Connection, lock: threading.RLock) -> None:
        self._conn = conn
        self._lock = lock
        self._active = False

    @property
    def in_transaction(self) -> bool:
        return self._active

    def start_transaction(self) -> None:
        if self._active:
            raise RuntimeError("Transaction already in progress.")
        self._lock.acquire()
        try:
            self._conn.execute("BEGIN IMMEDIATE")
        except Exception:
            self._lock.release()
            raise
        self._active = True

    def commit_transaction(self) -> None:
        if not self._active:
            raise RuntimeError("No transaction in progress.")
        try:
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise
        finally:
            self._finish()

    def abort_transaction(self) -> None:
        if not self._active:
            return
        try:
            self._conn.rollback()
        finally:
            self._finish()

    def end_session(self) -> None:
        self.abort_transaction()

    def _finish(self) -> None:
        self._active = False
        self._lock.release()


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway."""

    def __init__(self, path: Path) -> None:
        if str(path) != ":memory:":
            path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        self._initialize()

    def _initialize(self) -> None:
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS subscriptions (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    price REAL NOT NULL,
                    currency TEXT NOT NULL,
                    frequency TEXT NOT NULL,
                    category TEXT NOT NULL,
                    payment_method TEXT NOT NULL,
                    status TEXT NOT NULL,
                    start_date TEXT NOT NULL,
                    renewal_date TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_subscriptions_user_id
                    ON subscriptions(user_id);
                """
            )

    def close(self) -> None:
        self._conn.close()

    # UserRepository API ----------------------------------------------------
    def start_session(self) -> SQLiteSession:
        return SQLiteSession(self._conn, self._lock)

    def get_user_by_email(self, email: str, session: Optional[SQLiteSession] = None) -> Optional[User]:
        # A session shares the connection, so reads see its uncommitted writes.
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE email = ?", (email.lower(),))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def create_user(self, user: User, session: Optional[SQLiteSession] = None) -> User:
        statement = """
            INSERT INTO users (id, name, email, password_hash, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """
        params = (
            user.id,
            user.name,
            user.email.lower(),
            user.password_hash,
            self._format_datetime(user.created_at),
            self._format_datetime(user.updated_at),
        )
        try:
            if session is not None and session.in_transaction:
                with self._lock:
                    self._conn.execute(statement, params)
            else:
                with self._lock, self._conn:
                    self._conn.execute(statement, params)
        except sqlite3.IntegrityError as exc:
            raise ConflictError("User already exists.") from exc
        return user

    def count_users(self) -> int:
        with self._lock:
            cur = self._conn.execute("SELECT COUNT(*) FROM users")
            return cur.fetchone()[0]

    def delete_user(self, user_id: str) -> None:
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM subscriptions WHERE user_id = ?", (user_id,))
            self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))

    # SubscriptionRepository API -------------------------------------------
    def save_subscription(self, subscription: Subscription) -> Subscription:
        # Ownership is fixed at creation, so user_id is never updated.
        with self._lock, self._conn:
            self._conn.execute(
                """
                INSERT INTO subscriptions (
                    id, user_id, name, price, currency, frequency, category,
                    payment_method, status, start_date, renewal_date,
                    created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    price = excluded.price,
                    currency = excluded.currency,
                    frequency = excluded.frequency,
                    category = excluded.category,
                    payment_method = excluded.payment_method,
                    status = excluded.status,
                    start_date = excluded.start_date,
                    renewal_date = excluded.renewal_date,
                    updated_at = excluded.updated_at
                """,
                self._subscription_params(subscription),
            )
        return subscription

    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM subscriptions WHERE id = ?", (subscription_id,))
            row = cur.fetchone()
        return self._row_to_subscription(row) if row else None

    def list_subscriptions_for_user(self, user_id: str) -> List[Subscription]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM subscriptions WHERE user_id = ? ORDER BY created_at DESC",
                (user_id,),
            )
            rows = cur.fetchall()
        return [self._row_to_subscription(row) for row in rows]

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def _format_datetime(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="microseconds")

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _subscription_params(self, subscription: Subscription) -> Tuple[Any, ...]:
        if subscription.renewal_date is None:
            raise ValueError("Subscription renewal date must be derived before saving.")
        return (
            subscription.id,
            subscription.user_id,
            subscription.name,
            subscription.price,
            subscription.currency.value,
            subscription.frequency.value,
            subscription.category.value,
            subscription.payment_method,
            subscription.status.value,
            self._format_datetime(subscription.start_date),
            self._format_datetime(subscription.renewal_date),
            self._format_datetime(subscription.created_at),
            self._format_datetime(subscription.updated_at),
        )

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_subscription(self, row: sqlite3.Row) -> Subscription:
        return Subscription(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            price=row["price"],
            currency=Currency(row["currency"]),
            frequency=Frequency(row["frequency"]),
            category=Category(row["category"]),
            payment_method=row["payment_method"],
            status=SubscriptionStatus(row["status"]),
            start_date=self._parse_datetime(row["start_date"]),
            renewal_date=self._parse_datetime(row["renewal_date"]),
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )
