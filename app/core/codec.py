"""
Mapping between domain records and stored rows.

Enums are persisted as fixed lowercase literals through explicit tables,
and timestamps as RFC3339 text in UTC. Row decoding works on any object
exposing the column attributes, so ORM rows and plain result rows both fit.
"""

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, Mapping, Optional, Tuple, Type, TypeVar

from app.schemas.application import Application, ApplicationStatus
from app.schemas.job import EmploymentType, Job
from app.schemas.user import User, UserRole

E = TypeVar("E", bound=Enum)


class CodecError(ValueError):
    """Stored or incoming data could not be converted."""
    pass


class InvalidEnumValue(CodecError):
    """Text does not name any variant of the target enum."""

    def __init__(self, enum_name: str, value: Any):
        self.enum_name = enum_name
        self.value = value
        super().__init__(f"{value!r} is not a valid {enum_name}")


class MalformedTimestamp(CodecError):
    """Text is not an RFC3339 timestamp with an offset."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"{value!r} is not a valid RFC3339 timestamp")


class EnumCodec(Generic[E]):
    """Bidirectional table between enum members and their stored literals."""

    def __init__(self, enum_cls: Type[E], literals: Mapping[E, str]):
        missing = set(enum_cls) - set(literals)
        if missing:
            raise ValueError(f"{enum_cls.__name__} codec is missing {sorted(m.name for m in missing)}")
        self.enum_cls = enum_cls
        self._to_text: Dict[E, str] = dict(literals)
        self._from_text: Dict[str, E] = {text: member for member, text in literals.items()}

    def encode(self, member: E) -> str:
        return self._to_text[member]

    def decode(self, text: str) -> E:
        # Exact, case-sensitive lookup
        try:
            return self._from_text[text]
        except (KeyError, TypeError):
            raise InvalidEnumValue(self.enum_cls.__name__, text) from None

    @property
    def literals(self):
        return tuple(self._to_text.values())

    def sql_check(self, column: str) -> str:
        """SQL predicate restricting a column to this codec's literals."""
        quoted = ", ".join(f"'{text}'" for text in self.literals)
        return f"{column} IN ({quoted})"


USER_ROLE = EnumCodec(UserRole, {
    UserRole.JOB_SEEKER: "job_seeker",
    UserRole.EMPLOYER: "employer",
})

EMPLOYMENT_TYPE = EnumCodec(EmploymentType, {
    EmploymentType.FULL_TIME: "full_time",
    EmploymentType.PART_TIME: "part_time",
    EmploymentType.CONTRACT: "contract",
})

APPLICATION_STATUS = EnumCodec(ApplicationStatus, {
    ApplicationStatus.PENDING: "pending",
    ApplicationStatus.REVIEWED: "reviewed",
    ApplicationStatus.ACCEPTED: "accepted",
    ApplicationStatus.REJECTED: "rejected",
})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def encode_timestamp(value: datetime) -> str:
    """Render an aware datetime as RFC3339 in UTC, e.g. 2024-09-16T15:30:00Z"""
    if not isinstance(value, datetime) or value.tzinfo is None:
        raise MalformedTimestamp(value)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


RFC3339_PATTERN = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)


def decode_timestamp(text: str) -> datetime:
    """
    Parse RFC3339 text into an aware UTC datetime.

    Seconds and an offset are mandatory. Fractions longer than microseconds
    (e.g. nanosecond precision) are truncated.
    """
    match = RFC3339_PATTERN.fullmatch(text) if isinstance(text, str) else None
    if match is None:
        raise MalformedTimestamp(text)

    date_part, time_part, fraction, offset = match.groups()
    micros = (fraction or "").ljust(6, "0")[:6]
    offset = "+00:00" if offset in ("Z", "z") else offset
    try:
        parsed = datetime.fromisoformat(f"{date_part}T{time_part}.{micros}{offset}")
    except ValueError:
        raise MalformedTimestamp(text) from None
    return parsed.astimezone(timezone.utc)


def _encode_changes(changes: Mapping[str, Any], allowed: Tuple[str, ...], enums: Mapping[str, EnumCodec]) -> Dict[str, Any]:
    values = {}
    for name, value in changes.items():
        if name not in allowed:
            continue
        values[name] = enums[name].encode(value) if name in enums else value
    return values


# Users

USER_MUTABLE_FIELDS = ("name", "email", "password", "role")


def encode_new_user(name: str, email: str, password: str, role: UserRole, now: datetime) -> Dict[str, Any]:
    stamp = encode_timestamp(now)
    return {
        "name": name,
        "email": email,
        "password": password,
        "role": USER_ROLE.encode(role),
        "created_at": stamp,
        "updated_at": stamp,
    }


def encode_user_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    return _encode_changes(changes, USER_MUTABLE_FIELDS, {"role": USER_ROLE})


def decode_user(row: Any) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        password=row.password,
        role=USER_ROLE.decode(row.role),
        created_at=decode_timestamp(row.created_at),
        updated_at=decode_timestamp(row.updated_at),
    )


# Jobs

JOB_MUTABLE_FIELDS = ("title", "description", "location", "salary", "employment_type")


def encode_new_job(
    employer_id: int,
    title: str,
    description: str,
    location: str,
    salary: Optional[str],
    employment_type: EmploymentType,
    now: datetime,
) -> Dict[str, Any]:
    stamp = encode_timestamp(now)
    return {
        "employer_id": employer_id,
        "title": title,
        "description": description,
        "location": location,
        "salary": salary,
        "employment_type": EMPLOYMENT_TYPE.encode(employment_type),
        "posted_at": stamp,
        "updated_at": stamp,
    }


def encode_job_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    return _encode_changes(changes, JOB_MUTABLE_FIELDS, {"employment_type": EMPLOYMENT_TYPE})


def decode_job(row: Any) -> Job:
    return Job(
        id=row.id,
        employer_id=row.employer_id,
        title=row.title,
        description=row.description,
        location=row.location,
        salary=row.salary,
        employment_type=EMPLOYMENT_TYPE.decode(row.employment_type),
        posted_at=decode_timestamp(row.posted_at),
        updated_at=decode_timestamp(row.updated_at),
    )


# Applications

APPLICATION_MUTABLE_FIELDS = ("cover_letter", "resume", "status")


def encode_new_application(
    job_seeker_id: int,
    job_id: int,
    cover_letter: Optional[str],
    resume: Optional[str],
    status: ApplicationStatus,
    now: datetime,
) -> Dict[str, Any]:
    return {
        "job_seeker_id": job_seeker_id,
        "job_id": job_id,
        "cover_letter": cover_letter,
        "resume": resume,
        "status": APPLICATION_STATUS.encode(status),
        "applied_at": encode_timestamp(now),
    }


def encode_application_changes(changes: Mapping[str, Any]) -> Dict[str, Any]:
    return _encode_changes(changes, APPLICATION_MUTABLE_FIELDS, {"status": APPLICATION_STATUS})


def decode_application(row: Any) -> Application:
    return Application(
        id=row.id,
        job_seeker_id=row.job_seeker_id,
        job_id=row.job_id,
        cover_letter=row.cover_letter,
        resume=row.resume,
        status=APPLICATION_STATUS.decode(row.status),
        applied_at=decode_timestamp(row.applied_at),
    )
