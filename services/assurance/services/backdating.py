"""
Backdating Guard
================

Rules for caller-supplied effective dates.

- A parseable effective date that is not in the future becomes the
  timestamp of the new history entry; anything else falls back to now.
- The display "update date" of an entity may never move behind the
  most recent recorded change; such a value is dropped in favour of the
  previous one.

Version: 0.1.0
"""

from datetime import UTC, date, datetime, time


def parse_effective_date(value: str | None) -> datetime | None:
    """
    Parse an ISO date or datetime string.

    Naive values are taken as UTC; bare dates as midnight UTC.

    Returns:
        Aware datetime, or None when the value is empty or unparseable
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _is_date_only(value: str) -> bool:
    try:
        date.fromisoformat(value.strip())
    except ValueError:
        return False
    return True


def parse_range_end(value: str | None) -> datetime | None:
    """Parse an inclusive upper date bound; a bare date covers that whole day."""
    parsed = parse_effective_date(value)
    if parsed is not None and _is_date_only(value or ""):
        return datetime.combine(parsed.date(), time.max, tzinfo=UTC)
    return parsed


def resolve_history_timestamp(effective_date: str | None, now: datetime) -> datetime:
    """
    Timestamp for a new history entry.

    Args:
        effective_date: Caller-supplied effective date
        now: Current time (aware)

    Returns:
        The effective date when it parses and is not after `now`, else `now`
    """
    parsed = parse_effective_date(effective_date)
    if parsed is None or parsed > now:
        return now
    return parsed


def guard_update_date(
    requested: str | None,
    previous: str | None,
    latest_history: datetime | None,
    now: datetime,
) -> str | None:
    """
    Decide the display update date to persist.

    An empty request defaults to today's date. A request earlier than the
    latest active history timestamp is discarded and the previous value
    kept. Date-only values are compared by calendar day.

    Args:
        requested: Update date from the incoming payload
        previous: Update date currently stored
        latest_history: Timestamp of the newest active history entry before this call
        now: Current time (aware)
    """
    if not requested or not requested.strip():
        return previous or now.date().isoformat()

    parsed = parse_effective_date(requested)
    if parsed is None or latest_history is None:
        return requested

    if _is_date_only(requested):
        regresses = parsed.date() < latest_history.astimezone(UTC).date()
    else:
        regresses = parsed < latest_history

    if regresses:
        return previous
    return requested


def utc_now() -> datetime:
    return datetime.now(UTC)
