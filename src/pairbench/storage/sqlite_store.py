"""
SQLite Record Store
===================
RecordStore backed by a SQLite file with the customers / order_items schema.

Every call opens its own connection, so the store can be shared by request
threads without a pooled connection. Driver errors surface as
CollaboratorFailureError; nothing is retried here.
"""

from __future__ import annotations

import random
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from loguru import logger

from pairbench.core.exceptions import wrap_storage_exception
from .base import Customer, OrderItem, RecordStore


# Stays under SQLITE_MAX_VARIABLE_NUMBER on old builds (999)
_IN_CLAUSE_CHUNK = 900

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS customers (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS order_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        customer_id INTEGER REFERENCES customers(id),
        product TEXT NOT NULL,
        quantity INTEGER NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_order_items_customer
    ON order_items(customer_id)
    """,
)


def _chunks(values: Sequence[int], size: int) -> Iterator[Sequence[int]]:
    for start in range(0, len(values), size):
        yield values[start:start + size]


class SQLiteRecordStore(RecordStore):
    """
    Customers and order items in a SQLite database file.

    Args:
        db_path: Database file; parent directories are created.
        timeout: Seconds to wait on a locked database.
    """

    def __init__(self, db_path: str, timeout: float = 10.0):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.timeout = timeout
        self._round_trips = 0
        self._counter_lock = threading.Lock()
        self._init_db()

    @property
    def name(self) -> str:
        return "sqlite"

    @property
    def round_trips(self) -> int:
        with self._counter_lock:
            return self._round_trips

    @contextmanager
    def _connect(self, operation: str) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        except sqlite3.Error as e:
            raise wrap_storage_exception(self.name, operation, e) from e
        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            raise wrap_storage_exception(self.name, operation, e) from e
        finally:
            conn.close()

    def _count_round_trip(self) -> None:
        with self._counter_lock:
            self._round_trips += 1

    def _init_db(self) -> None:
        with self._connect("init_schema") as conn:
            for statement in _SCHEMA:
                conn.execute(statement)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_by_owner_id(self, owner_id: int) -> List[OrderItem]:
        self._count_round_trip()
        with self._connect("find_by_owner_id") as conn:
            rows = conn.execute(
                """
                SELECT id, customer_id, product, quantity FROM order_items
                WHERE customer_id = ?
                ORDER BY id
                """,
                (owner_id,),
            ).fetchall()
        return [OrderItem(*row) for row in rows]

    def find_by_owner_id_in(self, owner_ids: Sequence[int]) -> List[OrderItem]:
        self._count_round_trip()
        ids = list(dict.fromkeys(owner_ids))
        if not ids:
            return []
        items: List[OrderItem] = []
        with self._connect("find_by_owner_id_in") as conn:
            for chunk in _chunks(ids, _IN_CLAUSE_CHUNK):
                placeholders = ",".join("?" * len(chunk))
                rows = conn.execute(
                    f"""
                    SELECT id, customer_id, product, quantity FROM order_items
                    WHERE customer_id IN ({placeholders})
                    ORDER BY id
                    """,
                    tuple(chunk),
                ).fetchall()
                items.extend(OrderItem(*row) for row in rows)
        return items

    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        self._count_round_trip()
        with self._connect("find_by_id") as conn:
            row = conn.execute(
                "SELECT id, name FROM customers WHERE id = ?",
                (customer_id,),
            ).fetchone()
        return Customer(*row) if row else None

    def find_all_by_ids(self, customer_ids: Sequence[int]) -> List[Customer]:
        self._count_round_trip()
        ids = list(dict.fromkeys(customer_ids))
        if not ids:
            return []
        customers: List[Customer] = []
        with self._connect("find_all_by_ids") as conn:
            for chunk in _chunks(ids, _IN_CLAUSE_CHUNK):
                placeholders = ",".join("?" * len(chunk))
                rows = conn.execute(
                    f"SELECT id, name FROM customers WHERE id IN ({placeholders}) ORDER BY id",
                    tuple(chunk),
                ).fetchall()
                customers.extend(Customer(*row) for row in rows)
        return customers

    def ping(self) -> bool:
        try:
            with self._connect("ping") as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except Exception as e:
            logger.warning(f"Record store ping failed: {e}")
            return False

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def count(self) -> dict:
        with self._connect("count") as conn:
            customers = conn.execute("SELECT COUNT(*) FROM customers").fetchone()[0]
            items = conn.execute("SELECT COUNT(*) FROM order_items").fetchone()[0]
        return {"customers": customers, "order_items": items}

    def add_customer(self, name: str) -> int:
        with self._connect("add_customer") as conn:
            cursor = conn.execute("INSERT INTO customers(name) VALUES (?)", (name,))
            return cursor.lastrowid

    def add_order_item(self, customer_id: int, product: str, quantity: int) -> int:
        with self._connect("add_order_item") as conn:
            cursor = conn.execute(
                "INSERT INTO order_items(customer_id, product, quantity) VALUES (?, ?, ?)",
                (customer_id, product, quantity),
            )
            return cursor.lastrowid

    def reset(self) -> None:
        """Drop all rows and restart id sequences."""
        with self._connect("reset") as conn:
            conn.execute("DELETE FROM order_items")
            conn.execute("DELETE FROM customers")
            # sqlite_sequence only exists once an AUTOINCREMENT table saw an insert
            has_sequence = conn.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'sqlite_sequence'"
            ).fetchone()
            if has_sequence:
                conn.execute("DELETE FROM sqlite_sequence WHERE name IN ('customers', 'order_items')")

    def seed(self, customers: int = 1000, order_items: int = 5000, random_seed: int = 42) -> dict:
        """
        Populate sample data: ``customers`` named customers and ``order_items``
        items owned by random customers, with random products and quantities.

        Seeding only runs on an empty store. Returns the resulting row counts.
        """
        existing = self.count()
        if existing["customers"] > 0:
            logger.info(f"Record store already seeded: {existing}")
            return existing

        rng = random.Random(random_seed)
        with self._connect("seed") as conn:
            conn.executemany(
                "INSERT INTO customers(name) VALUES (?)",
                ((f"Customer {i}",) for i in range(1, customers + 1)),
            )
            if customers > 0:
                conn.executemany(
                    "INSERT INTO order_items(customer_id, product, quantity) VALUES (?, ?, ?)",
                    (
                        (
                            rng.randint(1, customers),
                            f"Product {rng.randint(1, 51)}",
                            rng.randint(1, 11),
                        )
                        for _ in range(order_items)
                    ),
                )

        counts = self.count()
        logger.info(f"Seeded record store at {self.db_path}: {counts}")
        return counts


__all__ = ["SQLiteRecordStore"]
