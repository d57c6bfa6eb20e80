from datetime import datetime
import time


def get_current_timestamp() -> int:
    """Get current time as millisecond timestamp"""
    return int(time.time() * 1000)

def get_local_datetime() -> datetime:
    """Get current local wall-clock time truncated to whole seconds"""
    return datetime.now().replace(microsecond=0)

def format_clock(dt: datetime) -> str:
    """Format a datetime as a 24h HH:MM:SS clock label"""
    return dt.strftime('%H:%M:%S')

def format_time_difference(time_difference_ms: int) -> str:
    """
    Format a time difference in milliseconds to a human-readable string.

    Args:
        time_difference_ms (int): Time difference in milliseconds.

    Returns:
        str: Formatted time difference string.
    """
    seconds = time_difference_ms // 1000
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    if days > 0:
        return f"{days}d {hours}h"
    elif hours > 0:
        return f"{hours}h {minutes}m"
    elif minutes > 0:
        return f"{minutes}m {seconds}s"
    else:
        return f"{seconds}s"
