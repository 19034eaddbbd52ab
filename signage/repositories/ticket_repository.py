from datetime import date, datetime
from typing import Any
from uuid import UUID

from psycopg import Connection

from signage.models.entities import TicketEntity, TicketStatus
from signage.repositories.base import Repository

TICKET_COLUMNS = """
    id, number, status, created_at, called_at,
    attendant_ref, attendant_label, service_type_ref
"""


def _to_ticket_entity(row: dict[str, Any]) -> TicketEntity:
    return TicketEntity(
        id=row["id"],
        number=row["number"],
        status=row["status"],
        created_at=row["created_at"],
        called_at=row["called_at"],
        attendant_ref=row["attendant_ref"],
        attendant_label=row["attendant_label"],
        service_type_ref=row["service_type_ref"],
    )


class TicketRepository(Repository):
    def create(
        self,
        *,
        number: str,
        created_at: datetime,
        connection: Connection | None = None,
    ) -> TicketEntity:
        query = f"""
            INSERT INTO tickets (number, status, created_at)
            VALUES (%s, 'waiting', %s)
            RETURNING {TICKET_COLUMNS}
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (number, created_at))
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to create ticket.")
        return _to_ticket_entity(row)

    def get_by_id(
        self,
        ticket_id: UUID,
        connection: Connection | None = None,
    ) -> TicketEntity | None:
        query = f"SELECT {TICKET_COLUMNS} FROM tickets WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (ticket_id,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_ticket_entity(row)

    def count_created_between(
        self,
        *,
        start: datetime,
        end: datetime,
        connection: Connection | None = None,
    ) -> int:
        query = """
            SELECT COUNT(1) AS total
            FROM tickets
            WHERE created_at >= %s AND created_at < %s
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (start, end))
                row = cursor.fetchone()
        return int(row["total"]) if row is not None else 0

    def next_daily_sequence(self, *, day: date, connection: Connection | None = None) -> int:
        query = """
            INSERT INTO ticket_sequences (day, last_value)
            VALUES (%s, 1)
            ON CONFLICT (day) DO UPDATE
            SET last_value = ticket_sequences.last_value + 1
            RETURNING last_value
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (day,))
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to advance the daily ticket sequence.")
        return int(row["last_value"])

    def mark_called(
        self,
        *,
        ticket_id: UUID,
        attendant_ref: str,
        called_at: datetime,
        connection: Connection | None = None,
    ) -> TicketEntity | None:
        """Move a waiting ticket to called; returns None when the ticket is not waiting."""
        query = f"""
            UPDATE tickets
            SET status = 'called',
                called_at = %s,
                attendant_ref = %s
            WHERE id = %s AND status = 'waiting'
            RETURNING {TICKET_COLUMNS}
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (called_at, attendant_ref, ticket_id))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_ticket_entity(row)

    def mark_completed(
        self,
        *,
        ticket_id: UUID,
        service_type_ref: UUID | None,
        connection: Connection | None = None,
    ) -> TicketEntity | None:
        """Move a called ticket to completed; returns None when the ticket is not called."""
        query = f"""
            UPDATE tickets
            SET status = 'completed',
                service_type_ref = %s
            WHERE id = %s AND status = 'called'
            RETURNING {TICKET_COLUMNS}
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (service_type_ref, ticket_id))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_ticket_entity(row)

    def first_waiting(self, connection: Connection | None = None) -> TicketEntity | None:
        query = f"""
            SELECT {TICKET_COLUMNS}
            FROM tickets
            WHERE status = 'waiting'
            ORDER BY created_at ASC, id ASC
            LIMIT 1
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query)
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_ticket_entity(row)

    def list_filtered(
        self,
        *,
        status: TicketStatus | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
        connection: Connection | None = None,
    ) -> list[TicketEntity]:
        where_clauses: list[str] = []
        params: list[Any] = []

        if status is not None:
            where_clauses.append("status = %s")
            params.append(status)
        if created_from is not None:
            where_clauses.append("created_at >= %s")
            params.append(created_from)
        if created_to is not None:
            where_clauses.append("created_at < %s")
            params.append(created_to)

        where_sql = ""
        if where_clauses:
            where_sql = "WHERE " + " AND ".join(where_clauses)

        query = f"""
            SELECT {TICKET_COLUMNS}
            FROM tickets
            {where_sql}
            ORDER BY created_at ASC, id ASC
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, params)
                rows = cursor.fetchall()
        return [_to_ticket_entity(row) for row in rows]

    def list_snapshot(
        self,
        *,
        since: datetime,
        connection: Connection | None = None,
    ) -> list[TicketEntity]:
        """Tickets still in the queue plus everything created since ``since``."""
        query = f"""
            SELECT {TICKET_COLUMNS}
            FROM tickets
            WHERE status <> 'completed' OR created_at >= %s
            ORDER BY created_at ASC, id ASC
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (since,))
                rows = cursor.fetchall()
        return [_to_ticket_entity(row) for row in rows]

    def freeze_attendant_label(
        self,
        *,
        attendant_ref: str,
        label: str,
        connection: Connection | None = None,
    ) -> int:
        query = """
            UPDATE tickets
            SET attendant_label = %s
            WHERE attendant_ref = %s AND attendant_label IS NULL
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (label, attendant_ref))
                return cursor.rowcount
