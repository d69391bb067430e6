"""Date parsing and Korean display formatting helpers"""
from datetime import datetime, timezone
from typing import Optional

MISSING_DETAIL_TIMESTAMP = "작성일 정보를 찾을 수 없어요"

WEEKDAY_KO = ["월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일"]


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 string (a trailing "Z" is accepted)

    Returns:
        datetime, or None when the value is empty or unparsable
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_local(dt: datetime, now: datetime) -> datetime:
    """Express `dt` in the same timezone convention as `now`.

    Aware values are converted to now's zone (or the system zone when `now`
    is naive, then made naive). Naive values are taken as already local.
    """
    if dt.tzinfo is None:
        return dt if now.tzinfo is None else dt.replace(tzinfo=now.tzinfo)
    if now.tzinfo is None:
        return dt.astimezone().replace(tzinfo=None)
    return dt.astimezone(now.tzinfo)


def calendar_days_between(dt: datetime, now: datetime) -> int:
    """Whole calendar days from dt's date to now's date (negative if dt is later)"""
    return (now.date() - to_local(dt, now).date()).days


def format_time_ko(dt: datetime) -> str:
    """
    Format the time of day as "오전 9:05" / "오후 3:40"
    """
    hour = dt.hour
    period = "오전" if hour < 12 else "오후"
    display_hour = hour % 12 or 12
    return f"{period} {display_hour}:{dt.minute:02d}"


def format_preview_timestamp(created_at: str, now: Optional[datetime] = None) -> str:
    """
    Timestamp for the note list: time of day for today's notes, else month/day.

    Returns:
        str: "오후 3:40" or "10월 14일"; "" when unparsable
    """
    note_dt = parse_iso(created_at)
    if note_dt is None:
        return ""

    now = now or datetime.now().astimezone()
    local_dt = to_local(note_dt, now)

    if local_dt.date() == now.date():
        return format_time_ko(local_dt)

    return f"{local_dt.month}월 {local_dt.day}일"


def format_detail_timestamp(created_at: str, now: Optional[datetime] = None) -> str:
    """
    Timestamp for the editor pane.

    Returns:
        str: "2025년 10월 14일 화요일 오전 10:30"
    """
    note_dt = parse_iso(created_at)
    if note_dt is None:
        return MISSING_DETAIL_TIMESTAMP

    now = now or datetime.now().astimezone()
    local_dt = to_local(note_dt, now)

    return (
        f"{local_dt.year}년 {local_dt.month}월 {local_dt.day}일 "
        f"{WEEKDAY_KO[local_dt.weekday()]} {format_time_ko(local_dt)}"
    )
