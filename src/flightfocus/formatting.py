"""Display formatting helpers shared by the CLI and TUI."""

from datetime import date, datetime, timedelta

from flightfocus.stats import local_date


def format_clock(seconds: int) -> str:
    """Format a countdown as ``MM:SS``, or ``HH:MM:SS`` from one hour up."""
    hours, rem = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_minutes(minutes: int) -> str:
    """Format focus minutes like ``1h 5m`` or ``45m``."""
    hours, mins = divmod(max(0, minutes), 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def format_completed_date(moment: datetime, today: date | None = None) -> str:
    """Relative label for a completion time.

    Returns:
        "Today", "Yesterday", "Oct 5", or "Oct 5, 2025" for other years.
    """
    today = today or date.today()
    day = local_date(moment)
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    label = f"{day.strftime('%b')} {day.day}"
    if day.year != today.year:
        label += f", {day.year}"
    return label


def format_coordinate(lat: float, lon: float) -> str:
    """Format a position like ``51.47°N 0.45°W``."""
    ns = "N" if lat >= 0 else "S"
    ew = "E" if lon >= 0 else "W"
    return f"{abs(lat):.2f}°{ns} {abs(lon):.2f}°{ew}"
