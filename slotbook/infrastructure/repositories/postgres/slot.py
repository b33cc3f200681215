"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/slot.py
============================================================
Class: PostgresSlotRepository

Responsibilities:
  - Persistir slots en PostgreSQL (SQL crudo, parametrizado).
  - Garantías atómicas que piden los casos de uso:
      * create_slot_if_free: advisory lock por (faculty, fecha) + chequeo
        de solapamiento + INSERT en una transacción; la exclusion constraint
        `slots_no_overlap` es la última red (ExclusionViolation -> None).
      * book_slot: UPDATE ... WHERE status = 'available'.
      * transition_slot: UPDATE ... WHERE status = <esperado>.
      * delete_slot_if_deletable: DELETE con ownership + estado en la query.
  - Proyecciones SlotDetails con LEFT JOIN a users (faculty y scholar).

Collaborators:
  - PostgresRepositoryBase
  - psycopg.errors.ExclusionViolation
  - domain.slot_policy.find_conflicts (misma regla que el use case)

Constraints / Notes:
  - Ordering determinístico: date ASC, start_time ASC, id ASC.
  - where_sql se arma SOLO dentro del repo (nunca desde input de usuario).
============================================================
"""

from __future__ import annotations

from datetime import date as Date
from datetime import datetime
from uuid import UUID

from psycopg import errors as pg_errors

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import (
    BLOCKING_STATUSES,
    DELETABLE_STATUSES,
    Slot,
    SlotDetails,
    SlotStatus,
)
from ....domain.slot_policy import find_conflicts
from ....identity.users import UserProfile
from ._base import PostgresRepositoryBase

_SLOT_COLUMNS = (
    "id, faculty_id, date, start_time, end_time, status, "
    "scholar_id, notes, meeting_link, created_at, updated_at"
)
_SLOT_COLUMN_COUNT = 11

_DETAIL_COLUMNS = """
    s.id, s.faculty_id, s.date, s.start_time, s.end_time, s.status,
    s.scholar_id, s.notes, s.meeting_link, s.created_at, s.updated_at,
    f.id, f.name, f.email, f.picture,
    sc.id, sc.name, sc.email, sc.picture
"""

_DETAIL_FROM = """
    FROM slots s
    LEFT JOIN users f ON f.id = s.faculty_id
    LEFT JOIN users sc ON sc.id = s.scholar_id
"""

_ORDER_BY = "ORDER BY s.date ASC, s.start_time ASC, s.id ASC"


def _row_to_slot(row: tuple) -> Slot:
    try:
        status = SlotStatus(row[5])
    except ValueError as exc:
        raise DatabaseError(f"Invalid slot status in database: {row[5]}") from exc

    return Slot(
        id=row[0],
        faculty_id=row[1],
        date=row[2],
        start_time=row[3],
        end_time=row[4],
        status=status,
        scholar_id=row[6],
        notes=row[7],
        meeting_link=row[8],
        created_at=row[9],
        updated_at=row[10],
    )


def _profile(columns: tuple) -> UserProfile | None:
    user_id, name, email, picture = columns
    if user_id is None:
        return None
    return UserProfile(id=user_id, name=name, email=email, picture=picture)


def _row_to_details(row: tuple) -> SlotDetails:
    n = _SLOT_COLUMN_COUNT
    return SlotDetails(
        slot=_row_to_slot(row[:n]),
        faculty=_profile(row[n : n + 4]),
        scholar=_profile(row[n + 4 : n + 8]),
    )


def _schedule_lock_key(faculty_id: UUID, day: Date) -> str:
    return f"slots:{faculty_id}:{day.isoformat()}"


class PostgresSlotRepository(PostgresRepositoryBase):
    """R: Implementación PostgreSQL del repositorio de slots."""

    _SQL_LOCK_SCHEDULE = "SELECT pg_advisory_xact_lock(hashtextextended(%s, 0))"

    _SQL_SAME_DAY = f"""
        SELECT {_SLOT_COLUMNS}
        FROM slots
        WHERE faculty_id = %s AND date = %s AND status = ANY(%s)
        ORDER BY start_time ASC
    """

    _SQL_INSERT = f"""
        INSERT INTO slots (
            id, faculty_id, date, start_time, end_time, status,
            scholar_id, notes, meeting_link, created_at, updated_at
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING {_SLOT_COLUMNS}
    """

    _SQL_BOOK = f"""
        UPDATE slots
        SET status = %s, scholar_id = %s, notes = %s, meeting_link = %s,
            updated_at = %s
        WHERE id = %s AND status = %s
        RETURNING {_SLOT_COLUMNS}
    """

    _SQL_TRANSITION = f"""
        UPDATE slots
        SET status = %s,
            updated_at = %s,
            scholar_id = CASE WHEN %s THEN NULL ELSE scholar_id END,
            meeting_link = CASE WHEN %s THEN NULL ELSE meeting_link END
        WHERE id = %s AND status = %s
        RETURNING {_SLOT_COLUMNS}
    """

    _SQL_DELETE = """
        DELETE FROM slots
        WHERE id = %s AND faculty_id = %s AND status = ANY(%s)
        RETURNING id
    """

    # =========================================================
    # Helpers
    # =========================================================
    def _select_details(
        self, *, where_sql: str, params: list[object], context_msg: str
    ) -> list[SlotDetails]:
        rows = self._fetchall(
            query=f"SELECT {_DETAIL_COLUMNS} {_DETAIL_FROM} {where_sql} {_ORDER_BY}",
            params=params,
            context_msg=context_msg,
            extra={"where_sql": where_sql},
        )
        return [_row_to_details(r) for r in rows]

    # =========================================================
    # Escrituras atómicas
    # =========================================================
    def create_slot_if_free(self, slot: Slot) -> Slot | None:
        blocking = [s.value for s in BLOCKING_STATUSES]
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                with conn.transaction():
                    conn.execute(
                        self._SQL_LOCK_SCHEDULE,
                        (_schedule_lock_key(slot.faculty_id, slot.date),),
                    )
                    rows = conn.execute(
                        self._SQL_SAME_DAY, (slot.faculty_id, slot.date, blocking)
                    ).fetchall()
                    existing = [_row_to_slot(r) for r in rows]
                    if find_conflicts(slot.start_time, slot.end_time, existing):
                        return None

                    row = conn.execute(
                        self._SQL_INSERT,
                        (
                            slot.id,
                            slot.faculty_id,
                            slot.date,
                            slot.start_time,
                            slot.end_time,
                            slot.status.value,
                            slot.scholar_id,
                            slot.notes,
                            slot.meeting_link,
                            slot.created_at,
                            slot.updated_at,
                        ),
                    ).fetchone()
        except pg_errors.ExclusionViolation:
            logger.info(
                "alta de slot rechazada por exclusion constraint",
                extra={"faculty_id": str(slot.faculty_id)},
            )
            return None
        except Exception as exc:
            raise self._fail(
                "PostgresSlotRepository: create_slot_if_free failed",
                {"faculty_id": str(slot.faculty_id)},
                exc,
            ) from exc

        if row is None:  # pragma: no cover - RETURNING siempre devuelve
            raise DatabaseError("Unexpected: RETURNING clause returned no rows")
        return _row_to_slot(row)

    def book_slot(
        self,
        slot_id: UUID,
        *,
        scholar_id: UUID,
        notes: str | None,
        meeting_link: str,
        at: datetime,
    ) -> Slot | None:
        row = self._fetchone(
            query=self._SQL_BOOK,
            params=(
                SlotStatus.BOOKED.value,
                scholar_id,
                notes,
                meeting_link,
                at,
                slot_id,
                SlotStatus.AVAILABLE.value,
            ),
            context_msg="PostgresSlotRepository: book_slot failed",
            extra={"slot_id": str(slot_id)},
        )
        return _row_to_slot(row) if row else None

    def transition_slot(
        self,
        slot_id: UUID,
        *,
        expected: SlotStatus,
        target: SlotStatus,
        at: datetime,
    ) -> Slot | None:
        release = target == SlotStatus.CANCELLED
        row = self._fetchone(
            query=self._SQL_TRANSITION,
            params=(target.value, at, release, release, slot_id, expected.value),
            context_msg="PostgresSlotRepository: transition_slot failed",
            extra={"slot_id": str(slot_id), "target": target.value},
        )
        return _row_to_slot(row) if row else None

    def delete_slot_if_deletable(self, slot_id: UUID, faculty_id: UUID) -> bool:
        row = self._fetchone(
            query=self._SQL_DELETE,
            params=(slot_id, faculty_id, [s.value for s in DELETABLE_STATUSES]),
            context_msg="PostgresSlotRepository: delete_slot_if_deletable failed",
            extra={"slot_id": str(slot_id)},
        )
        return row is not None

    # =========================================================
    # Lecturas
    # =========================================================
    def list_slots_for_faculty_on(self, faculty_id: UUID, day: Date) -> list[Slot]:
        rows = self._fetchall(
            query=f"""
                SELECT {_SLOT_COLUMNS}
                FROM slots
                WHERE faculty_id = %s AND date = %s
                ORDER BY start_time ASC, id ASC
            """,
            params=(faculty_id, day),
            context_msg="PostgresSlotRepository: list_slots_for_faculty_on failed",
            extra={"faculty_id": str(faculty_id)},
        )
        return [_row_to_slot(r) for r in rows]

    def get_slot(self, slot_id: UUID) -> Slot | None:
        row = self._fetchone(
            query=f"SELECT {_SLOT_COLUMNS} FROM slots WHERE id = %s",
            params=(slot_id,),
            context_msg="PostgresSlotRepository: get_slot failed",
            extra={"slot_id": str(slot_id)},
        )
        return _row_to_slot(row) if row else None

    def get_available_slot(self, slot_id: UUID) -> SlotDetails | None:
        found = self._select_details(
            where_sql="WHERE s.id = %s AND s.status = %s",
            params=[slot_id, SlotStatus.AVAILABLE.value],
            context_msg="PostgresSlotRepository: get_available_slot failed",
        )
        return found[0] if found else None

    def get_owned_slot(self, slot_id: UUID, faculty_id: UUID) -> Slot | None:
        row = self._fetchone(
            query=f"""
                SELECT {_SLOT_COLUMNS}
                FROM slots
                WHERE id = %s AND faculty_id = %s
            """,
            params=(slot_id, faculty_id),
            context_msg="PostgresSlotRepository: get_owned_slot failed",
            extra={"slot_id": str(slot_id)},
        )
        return _row_to_slot(row) if row else None

    def get_slot_details(self, slot_id: UUID) -> SlotDetails | None:
        found = self._select_details(
            where_sql="WHERE s.id = %s",
            params=[slot_id],
            context_msg="PostgresSlotRepository: get_slot_details failed",
        )
        return found[0] if found else None

    def list_available_slots(
        self,
        *,
        from_date: Date,
        faculty_id: UUID | None = None,
        on_date: Date | None = None,
    ) -> list[SlotDetails]:
        conditions = ["s.status = %s", "s.date >= %s"]
        params: list[object] = [SlotStatus.AVAILABLE.value, from_date]

        if faculty_id is not None:
            conditions.append("s.faculty_id = %s")
            params.append(faculty_id)
        if on_date is not None:
            conditions.append("s.date = %s")
            params.append(on_date)

        return self._select_details(
            where_sql=f"WHERE {' AND '.join(conditions)}",
            params=params,
            context_msg="PostgresSlotRepository: list_available_slots failed",
        )

    def list_slots_by_scholar(self, scholar_id: UUID) -> list[SlotDetails]:
        return self._select_details(
            where_sql="WHERE s.scholar_id = %s",
            params=[scholar_id],
            context_msg="PostgresSlotRepository: list_slots_by_scholar failed",
        )

    def list_slots_by_faculty(self, faculty_id: UUID) -> list[SlotDetails]:
        return self._select_details(
            where_sql="WHERE s.faculty_id = %s",
            params=[faculty_id],
            context_msg="PostgresSlotRepository: list_slots_by_faculty failed",
        )

    def ping(self) -> bool:
        row = self._fetchone(
            query="SELECT 1",
            params=(),
            context_msg="PostgresSlotRepository: ping failed",
            extra={},
        )
        return row is not None
