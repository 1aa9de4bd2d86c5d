"""Date normalization for values arriving from storage, the API, or callers.

Everything the calendar compares is a naive local wall-clock ``datetime`` with
millisecond precision. Raw inputs are classified once into a tagged union and
then resolved; shapes that match none of the variants raise
:class:`UnsupportedDateError` instead of degrading to the epoch.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Mapping, Tuple, Union

from .errors import InvalidTimeError, UnsupportedDateError

_CLOCK_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_FRACTION_PATTERN = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")
_SHORT_OFFSET_PATTERN = re.compile(r"(\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?[+-]\d{2})$")
_END_OF_DAY = time(23, 59, 59, 999_000)


@dataclass(frozen=True, slots=True)
class LocalDate:
    value: date


@dataclass(frozen=True, slots=True)
class ExternalTimestamp:
    seconds: int
    nanos: int = 0


@dataclass(frozen=True, slots=True)
class EpochMillis:
    value: int


@dataclass(frozen=True, slots=True)
class IsoString:
    value: str


DateInput = Union[LocalDate, ExternalTimestamp, EpochMillis, IsoString]
DateLike = Any


def _nanos_of(source: Any) -> Any:
    if isinstance(source, Mapping):
        return source.get("nanos", source.get("nanoseconds"))
    return getattr(source, "nanos", getattr(source, "nanoseconds", None))


def _timestamp_parts(raw: Any) -> Tuple[int, int] | None:
    if isinstance(raw, Mapping):
        if "seconds" not in raw:
            return None
        seconds = raw["seconds"]
    else:
        seconds = getattr(raw, "seconds", None)
    nanos = _nanos_of(raw)
    if seconds is None or nanos is None:
        return None
    try:
        return int(seconds), int(nanos)
    except (TypeError, ValueError) as exc:
        raise UnsupportedDateError(f"Timestamp parts are not numeric: {raw!r}") from exc


def _convertible(raw: Any) -> date | None:
    for name in ("to_datetime", "toDate"):
        converter = getattr(raw, name, None)
        if callable(converter):
            converted = converter()
            if isinstance(converted, date):
                return converted
            raise UnsupportedDateError(f"{type(raw).__name__}.{name}() returned {converted!r}")
    return None


def classify(raw: DateLike) -> DateInput:
    """Resolve a raw value to one of the supported date input variants."""

    if isinstance(raw, (LocalDate, ExternalTimestamp, EpochMillis, IsoString)):
        return raw
    if isinstance(raw, date):
        return LocalDate(raw)
    parts = _timestamp_parts(raw)
    if parts is not None:
        return ExternalTimestamp(*parts)
    converted = _convertible(raw)
    if converted is not None:
        return LocalDate(converted)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return EpochMillis(int(raw))
        except (OverflowError, ValueError) as exc:
            raise UnsupportedDateError(f"Epoch milliseconds out of range: {raw!r}") from exc
    if isinstance(raw, str):
        return IsoString(raw)
    raise UnsupportedDateError(f"Unsupported date value: {raw!r}")


def _local_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def _canonical_iso(text: str) -> str:
    """Rewrite Postgres-style timestamps into a form ``fromisoformat`` reads on 3.10.

    Fractions are padded or cut to six digits, so ``10:00:00.12345`` parses.
    A bare hour offset such as ``+00`` gains its minutes.
    """

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_PATTERN.sub(lambda match: f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}", text, count=1)
    return _SHORT_OFFSET_PATTERN.sub(r"\1:00", text, count=1)


def _from_epoch(seconds: int, micros: int) -> datetime:
    try:
        return datetime.fromtimestamp(seconds).replace(microsecond=micros)
    except (OverflowError, OSError, ValueError) as exc:
        raise UnsupportedDateError(f"Timestamp out of range: {seconds}s") from exc


def resolve(value: DateInput) -> datetime:
    if isinstance(value, LocalDate):
        if isinstance(value.value, datetime):
            return _local_naive(value.value)
        return datetime.combine(value.value, time.min)
    if isinstance(value, ExternalTimestamp):
        extra, nanos = divmod(value.nanos, 1_000_000_000)
        return _from_epoch(value.seconds + extra, nanos // 1_000_000 * 1000)
    if isinstance(value, EpochMillis):
        seconds, millis = divmod(value.value, 1000)
        return _from_epoch(seconds, millis * 1000)
    if isinstance(value, IsoString):
        text = value.value.strip()
        try:
            parsed = datetime.fromisoformat(_canonical_iso(text))
        except ValueError as exc:
            raise UnsupportedDateError(f"Invalid ISO-8601 value: {value.value!r}") from exc
        return _local_naive(parsed)
    raise UnsupportedDateError(f"Unsupported date input: {value!r}")


def normalize(raw: DateLike) -> datetime:
    """Return ``raw`` as a naive local ``datetime`` truncated to milliseconds."""

    return resolve(classify(raw))


def to_day(raw: DateLike) -> date:
    if type(raw) is date:
        return raw
    return normalize(raw).date()


def day_key(raw: DateLike) -> str:
    return to_day(raw).isoformat()


def midnight(raw: DateLike) -> datetime:
    return datetime.combine(to_day(raw), time.min)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, _END_OF_DAY)


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    last = calendar.monthrange(year, month)[1]
    return start_of_day(date(year, month, 1)), end_of_day(date(year, month, last))


def epoch_millis(raw: DateLike) -> int:
    return round(normalize(raw).timestamp() * 1000)


def parse_clock(value: str) -> time:
    """Parse a zero-padded 24h ``HH:MM`` string."""

    match = _CLOCK_PATTERN.match(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeError(f"Time must be formatted HH:MM (24h), got {value!r}")
    return time(int(match.group(1)), int(match.group(2)))


def minutes_since_midnight(value: str) -> int:
    parsed = parse_clock(value)
    return parsed.hour * 60 + parsed.minute


__all__ = [
    "DateInput",
    "EpochMillis",
    "ExternalTimestamp",
    "IsoString",
    "LocalDate",
    "classify",
    "day_key",
    "end_of_day",
    "epoch_millis",
    "midnight",
    "minutes_since_midnight",
    "month_bounds",
    "normalize",
    "parse_clock",
    "resolve",
    "start_of_day",
    "to_day",
]
