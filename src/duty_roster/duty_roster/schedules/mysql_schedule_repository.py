from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import MAX_DAYS_IN_MONTH
from ..core.enums import ScheduleCategory, ShiftCode, SubjectKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, translate_errors
from ..substitutions.model import Substitution
from .model import CellWrite, MonthScope, ScheduleAssignment, ScheduleKey
from .repository import ScheduleRepository

_DAY_COLUMNS = ", ".join(f"day_{d}" for d in range(1, MAX_DAYS_IN_MONTH + 1))
_KEY_WHERE = "subject_id=%s AND schedule_type=%s AND unit=%s AND month=%s AND year=%s"
_SCOPE_WHERE = "schedule_type=%s AND unit=%s AND month=%s AND year=%s"


def _key_params(key: ScheduleKey) -> tuple:
    return (key.subject_id, key.category.value, key.unit, int(key.month), int(key.year))


def _scope_params(scope: MonthScope) -> tuple:
    return (scope.category.value, scope.unit, int(scope.month), int(scope.year))


def _row_to_assignment(r: dict) -> ScheduleAssignment:
    key = ScheduleKey(
        subject_id=str(r["subject_id"]),
        category=ScheduleCategory(r["schedule_type"]),
        unit=r["unit"],
        month=int(r["month"]),
        year=int(r["year"]),
    )
    days = {}
    for d in range(1, MAX_DAYS_IN_MONTH + 1):
        value = r.get(f"day_{d}")
        days[d] = ShiftCode(value) if value else None
    return ScheduleAssignment(key=key, days=days)


def _row_to_substitution(r: dict) -> Substitution:
    return Substitution(
        key=ScheduleKey(
            subject_id=str(r["subject_id"]),
            category=ScheduleCategory(r["schedule_type"]),
            unit=r["unit"],
            month=int(r["month"]),
            year=int(r["year"]),
        ),
        day=int(r["day"]),
        substitute_id=r.get("substitute_id"),
        substitute_name=r["substitute_name"],
        reason=r["reason"],
        created_at=r["created_at"],
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_assignments(self, *, scope: MonthScope) -> Sequence[ScheduleAssignment]:
        with translate_errors("list_assignments", key=scope):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT subject_id, schedule_type, unit, month, year, {_DAY_COLUMNS}
                    FROM work_schedules
                    WHERE {_SCOPE_WHERE}
                    """,
                    _scope_params(scope),
                )
                return [_row_to_assignment(r) for r in fetchall(cur)]

    def get_assignment(self, *, key: ScheduleKey) -> Optional[ScheduleAssignment]:
        with translate_errors("get_assignment", key=key):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT subject_id, schedule_type, unit, month, year, {_DAY_COLUMNS}
                    FROM work_schedules
                    WHERE {_KEY_WHERE}
                    """,
                    _key_params(key),
                )
                r = fetchone(cur)
                return _row_to_assignment(r) if r else None

    def write_cells(self, *, key: ScheduleKey, cells: Sequence[CellWrite], subject_kind: SubjectKind) -> None:
        if not cells:
            return

        # Later cells for the same day win, like successive single writes would.
        by_day: dict[int, Optional[ShiftCode]] = {}
        for cell in cells:
            if not 1 <= int(cell.day) <= MAX_DAYS_IN_MONTH:
                raise ValueError(f"Invalid day index: {cell.day!r}")
            by_day[int(cell.day)] = cell.code

        columns = [f"day_{d}" for d in by_day]
        values = [code.value if code else None for code in by_day.values()]
        emptied = [d for d, code in by_day.items() if code is None]

        with translate_errors("write_cells", key=key, cells=cells):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO work_schedules(subject_id, subject_kind, schedule_type, unit, month, year, {", ".join(columns)})
                    VALUES(%s,%s,%s,%s,%s,%s,{",".join(["%s"] * len(columns))})
                    ON DUPLICATE KEY UPDATE {", ".join(f"{c}=VALUES({c})" for c in columns)}
                    """,
                    (key.subject_id, subject_kind.value, *_key_params(key)[1:], *values),
                )
                if emptied:
                    cur.execute(
                        f"""
                        DELETE FROM schedule_substitutions
                        WHERE {_KEY_WHERE} AND day IN ({",".join(["%s"] * len(emptied))})
                        """,
                        (*_key_params(key), *emptied),
                    )

    def clear_month(self, *, scope: MonthScope) -> int:
        with translate_errors("clear_month", key=scope):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM work_schedules WHERE {_SCOPE_WHERE}", _scope_params(scope))
                removed = cur.rowcount
                cur.execute(f"DELETE FROM schedule_substitutions WHERE {_SCOPE_WHERE}", _scope_params(scope))
                return int(removed)

    def delete_placeholder(self, *, placeholder_id: str) -> int:
        kind = SubjectKind.PLACEHOLDER.value
        with translate_errors("delete_placeholder", key=placeholder_id):
            with db_cursor(self._conn_factory) as (_, cur):
                # Substitutions carry no kind column; match them through the placeholder's rows.
                cur.execute(
                    """
                    DELETE FROM schedule_substitutions
                    WHERE subject_id=%s
                      AND subject_id IN (SELECT subject_id FROM work_schedules WHERE subject_kind=%s)
                    """,
                    (str(placeholder_id), kind),
                )
                cur.execute(
                    "DELETE FROM work_schedules WHERE subject_id=%s AND subject_kind=%s",
                    (str(placeholder_id), kind),
                )
                return int(cur.rowcount)

    def list_substitutions(self, *, scope: MonthScope) -> Sequence[Substitution]:
        with translate_errors("list_substitutions", key=scope):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT subject_id, schedule_type, unit, month, year, day,
                           substitute_id, substitute_name, reason, created_at
                    FROM schedule_substitutions
                    WHERE {_SCOPE_WHERE}
                    ORDER BY day ASC, created_at ASC
                    """,
                    _scope_params(scope),
                )
                return [_row_to_substitution(r) for r in fetchall(cur)]

    def get_substitution(self, *, key: ScheduleKey, day: int) -> Optional[Substitution]:
        with translate_errors("get_substitution", key=key):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT subject_id, schedule_type, unit, month, year, day,
                           substitute_id, substitute_name, reason, created_at
                    FROM schedule_substitutions
                    WHERE {_KEY_WHERE} AND day=%s
                    """,
                    (*_key_params(key), int(day)),
                )
                r = fetchone(cur)
                return _row_to_substitution(r) if r else None

    def upsert_substitution(self, *, substitution: Substitution) -> None:
        s = substitution
        with translate_errors("upsert_substitution", key=s.key, cells=(s.day,)):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO schedule_substitutions(
                        subject_id, schedule_type, unit, month, year, day,
                        substitute_id, substitute_name, reason, created_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        substitute_id=VALUES(substitute_id),
                        substitute_name=VALUES(substitute_name),
                        reason=VALUES(reason),
                        created_at=VALUES(created_at)
                    """,
                    (*_key_params(s.key), int(s.day), s.substitute_id, s.substitute_name, s.reason, s.created_at),
                )

    def delete_substitution(self, *, key: ScheduleKey, day: int) -> bool:
        with translate_errors("delete_substitution", key=key, cells=(day,)):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"DELETE FROM schedule_substitutions WHERE {_KEY_WHERE} AND day=%s",
                    (*_key_params(key), int(day)),
                )
                return cur.rowcount > 0
