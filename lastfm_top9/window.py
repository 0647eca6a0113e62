from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

FRIDAY = 4  # date.weekday()


@dataclass(frozen=True)
class TimeWindow:
    start: date
    end: date
    start_epoch: int
    end_epoch: int

    @property
    def start_label(self) -> str:
        return self.start.isoformat()

    @property
    def end_label(self) -> str:
        return self.end.isoformat()

    def __str__(self) -> str:
        return f"{self.start_label} → {self.end_label}"


def last_completed_week(today: date | None = None) -> TimeWindow:
    """
    Return the most recent Saturday-to-Friday week that ended before `today`.

    A Saturday looks back a full week (2024-06-08 gives 2024-06-01 to
    2024-06-07); a Friday is never its own window's end since it is still
    in progress. Epoch bounds are local time and inclusive.
    """
    if today is None:
        today = date.today()

    days_since_friday = (today.weekday() - FRIDAY) % 7 or 7
    end = today - timedelta(days=days_since_friday)
    start = end - timedelta(days=6)

    start_epoch = int(datetime.combine(start, time.min).timestamp())
    end_epoch = int(datetime.combine(end, time(23, 59, 59)).timestamp())
    return TimeWindow(start, end, start_epoch, end_epoch)
