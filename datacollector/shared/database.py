"""Database configuration and MySQL-backed reading storage."""

import logging
import os
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pymysql
from pymysql.cursors import DictCursor

from .models import Reading, to_utc
from .store import ReadingStore, StorageError, validate_new_reading

logger = logging.getLogger(__name__)

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS sensor_readings (
        id INT AUTO_INCREMENT PRIMARY KEY,
        temperature DOUBLE NOT NULL,
        humidity DOUBLE NOT NULL,
        timestamp DATETIME(6) NOT NULL,
        device_id VARCHAR(50) NULL,
        INDEX ix_sensor_readings_timestamp (timestamp)
    )
"""

SELECT_COLUMNS = "id, temperature, humidity, timestamp, device_id"


@dataclass
class DBConfig:
    """Database connection configuration."""
    host: str
    user: str
    password: str
    database: str
    port: int = 3306

    @classmethod
    def from_env(cls) -> "DBConfig":
        """Create config from environment variables."""
        return cls(
            host=os.getenv("DB_HOST", "localhost"),
            user=os.getenv("DB_USER", ""),
            password=os.getenv("DB_PASSWORD", ""),
            database=os.getenv("DB_DATABASE", "sensordata"),
            port=int(os.getenv("DB_PORT", "3306")),
        )


def _to_db_timestamp(value: datetime) -> datetime:
    # DATETIME columns carry no zone; everything is stored as naive UTC
    return to_utc(value).replace(tzinfo=None)


def _row_to_reading(row: Dict[str, Any]) -> Reading:
    return Reading(
        id=row["id"],
        temperature=float(row["temperature"]),
        humidity=float(row["humidity"]),
        timestamp=row["timestamp"].replace(tzinfo=timezone.utc),
        device_id=row["device_id"],
    )


class ReadingsStorage(ReadingStore):
    """Manages storage and retrieval of readings in MySQL."""

    def __init__(self, db_config: DBConfig):
        """Initialize storage with database configuration.

        Args:
            db_config: Database connection configuration.
        """
        self.db_config = db_config
        self._connection: Optional[pymysql.Connection] = None
        self._lock = threading.Lock()

    def _get_connection(self) -> pymysql.Connection:
        """Get or create database connection."""
        if self._connection is None or not self._connection.open:
            try:
                self._connection = pymysql.connect(
                    host=self.db_config.host,
                    port=self.db_config.port,
                    user=self.db_config.user,
                    password=self.db_config.password,
                    database=self.db_config.database,
                    cursorclass=DictCursor,
                )
            except pymysql.MySQLError as e:
                raise StorageError(
                    f"Cannot connect to MySQL at {self.db_config.host}:{self.db_config.port}: {e}"
                ) from e
        return self._connection

    def ensure_schema(self) -> None:
        """Create the sensor_readings table if it does not exist yet."""
        with self._lock:
            conn = self._get_connection()
            try:
                with conn.cursor() as cursor:
                    cursor.execute(CREATE_TABLE_SQL)
                conn.commit()
            except pymysql.MySQLError as e:
                raise StorageError(f"Error creating sensor_readings table: {e}") from e
        logger.info("Ensured sensor_readings table exists")

    def add(self, reading: Reading) -> Reading:
        """Store a single reading.

        Args:
            reading: The reading to store. Must not have an id yet.

        Returns:
            A copy of the reading with the id assigned by MySQL.

        Raises:
            StorageError: If the insert fails; the transaction is rolled back.
        """
        validate_new_reading(reading)

        insert_sql = """
            INSERT INTO sensor_readings (temperature, humidity, timestamp, device_id)
            VALUES (%s, %s, %s, %s)
        """
        with self._lock:
            conn = self._get_connection()
            try:
                with conn.cursor() as cursor:
                    cursor.execute(
                        insert_sql,
                        (
                            reading.temperature,
                            reading.humidity,
                            _to_db_timestamp(reading.timestamp),
                            reading.device_id,
                        ),
                    )
                    reading_id = cursor.lastrowid
                conn.commit()
            except pymysql.MySQLError as e:
                self._rollback(conn)
                raise StorageError(f"Error storing reading: {e}") from e

        return replace(reading, timestamp=to_utc(reading.timestamp), id=reading_id)

    def get_range(self, start: datetime, end: datetime) -> List[Reading]:
        """Get readings within a time range, inclusive on both ends.

        Args:
            start: Start of time range.
            end: End of time range.

        Returns:
            Matching readings ordered by timestamp, oldest first.
        """
        query = f"""
            SELECT {SELECT_COLUMNS}
            FROM sensor_readings
            WHERE timestamp BETWEEN %s AND %s
            ORDER BY timestamp ASC, id ASC
        """
        rows = self._fetch(query, (_to_db_timestamp(start), _to_db_timestamp(end)))
        return [_row_to_reading(row) for row in rows]

    def get_latest(self) -> Optional[Reading]:
        """Get the most recent reading, or None if the table is empty."""
        query = f"""
            SELECT {SELECT_COLUMNS}
            FROM sensor_readings
            ORDER BY timestamp DESC, id DESC
            LIMIT 1
        """
        rows = self._fetch(query, ())
        return _row_to_reading(rows[0]) if rows else None

    def _fetch(self, query: str, params: tuple) -> List[Dict[str, Any]]:
        with self._lock:
            conn = self._get_connection()
            try:
                with conn.cursor() as cursor:
                    cursor.execute(query, params)
                    rows = list(cursor.fetchall())
                # End the read transaction so the next query sees new rows
                conn.commit()
                return rows
            except pymysql.MySQLError as e:
                self._rollback(conn)
                raise StorageError(f"Error fetching readings: {e}") from e

    def _rollback(self, conn) -> None:
        """Roll back after a failed statement; caller holds the lock.

        A connection that cannot even roll back is dropped so the next call
        reconnects instead of reusing a broken socket.
        """
        try:
            conn.rollback()
        except pymysql.MySQLError as e:
            logger.warning(f"Rollback failed, dropping MySQL connection: {e}")
            self._connection = None

    def close(self):
        """Close the database connection."""
        with self._lock:
            if self._connection:
                self._connection.close()
                self._connection = None
