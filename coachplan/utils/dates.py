from datetime import date, datetime, timedelta, timezone


def utcnow():
    """Naive UTC timestamp, the format every DateTime column is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def week_start(day=None):
    """Monday of the ISO week containing ``day`` (defaults to today)."""
    if day is None:
        day = utcnow().date()
    if isinstance(day, datetime):
        day = day.date()
    return day - timedelta(days=day.weekday())


def previous_week_start(current):
    return week_start(current) - timedelta(weeks=1)


def next_week_start(current):
    return week_start(current) + timedelta(weeks=1)


def is_current_week(start, today=None):
    return week_start(start) == week_start(today)


def is_week_start(day):
    return isinstance(day, date) and day.weekday() == 0


def parse_date(value):
    if value is None or isinstance(value, date):
        return value
    return datetime.strptime(value, "%Y-%m-%d").date()


def seconds_between(start, end):
    if not start or not end:
        return 0
    return max(0, int((end - start).total_seconds()))
