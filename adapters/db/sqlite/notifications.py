import datetime as _dt
import json
import sqlite3
import threading
from contextlib import closing
from typing import Any, Dict, List, Optional

from domains.notifications import NotificationRecord


def _now() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0)


def _parse_ts(value: Optional[str]) -> Optional[_dt.datetime]:
    if not value:
        return None
    return _dt.datetime.fromisoformat(value)


def _row_to_record(data: Dict[str, Any]) -> NotificationRecord:
    return NotificationRecord(
        id=data["id"],
        recipient_id=data["user_id"],
        type=data["type"],
        title=data["title"],
        message=data["message"],
        data=json.loads(data["data"] or "{}"),
        read_at=_parse_ts(data["read_at"]),
        created_at=_parse_ts(data["created_at"]),
    )


class NotificationsTable:
    """SQLite-backed store for in-app notifications."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._write_lock = threading.Lock()
        self._init()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init(self) -> None:
        with closing(self._connect()) as conn:
            cur = conn.cursor()
            cur.execute(
                '''
                CREATE TABLE IF NOT EXISTS notifications (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    type TEXT NOT NULL,
                    title TEXT NOT NULL,
                    message TEXT NOT NULL,
                    data TEXT NOT NULL DEFAULT '{}',
                    read_at TEXT DEFAULT NULL,
                    created_at TEXT NOT NULL
                )
                '''
            )
            cur.execute(
                'CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications (user_id, created_at)'
            )
            conn.commit()

    def create(self, record: NotificationRecord) -> NotificationRecord:
        created_at = record.created_at or _now()
        read_at = record.read_at.isoformat() if record.read_at else None
        with self._write_lock, closing(self._connect()) as conn:
            cur = conn.cursor()
            cur.execute(
                '''
                INSERT INTO notifications (user_id, type, title, message, data, read_at, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ''',
                (
                    str(record.recipient_id),
                    record.type,
                    record.title,
                    record.message,
                    json.dumps(record.data, default=str),
                    read_at,
                    created_at.isoformat(),
                ),
            )
            new_id = cur.lastrowid
            conn.commit()

        return NotificationRecord(
            id=new_id,
            recipient_id=str(record.recipient_id),
            type=record.type,
            title=record.title,
            message=record.message,
            data=dict(record.data),
            read_at=record.read_at,
            created_at=created_at,
        )

    def get(self, notification_id: int) -> Optional[NotificationRecord]:
        with closing(self._connect()) as conn:
            cur = conn.cursor()
            cur.execute('SELECT * FROM notifications WHERE id = ?', (notification_id,))
            row = cur.fetchone()
            desc = cur.description
        if not row:
            return None
        cols = [d[0] for d in desc]
        return _row_to_record(dict(zip(cols, row)))

    def list_for(
        self, recipient_id: str, *, unread_only: bool = False, limit: int = 50
    ) -> List[NotificationRecord]:
        query = 'SELECT * FROM notifications WHERE user_id = ?'
        if unread_only:
            query += ' AND read_at IS NULL'
        query += ' ORDER BY id DESC LIMIT ?'

        with closing(self._connect()) as conn:
            cur = conn.cursor()
            cur.execute(query, (str(recipient_id), max(1, int(limit))))
            rows = cur.fetchall()
            cols = [d[0] for d in cur.description]
        return [_row_to_record(dict(zip(cols, row))) for row in rows]

    def mark_read(self, recipient_id: str, notification_id: int) -> bool:
        with self._write_lock, closing(self._connect()) as conn:
            cur = conn.cursor()
            cur.execute(
                'UPDATE notifications SET read_at = ? WHERE id = ? AND user_id = ? AND read_at IS NULL',
                (_now().isoformat(), notification_id, str(recipient_id)),
            )
            updated = cur.rowcount
            conn.commit()
        return updated > 0
