from datetime import date, datetime

def iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return dt.replace(microsecond=0).isoformat() + "Z"

def today_str(today: date | None = None) -> str:
    # YYYY-MM-DD, the key of a day's task list
    return (today or date.today()).isoformat()

def greeting_for_hour(hour: int) -> str:
    if hour < 12:
        return "Good Morning"
    if hour < 17:
        return "Good Afternoon"
    return "Good Evening"
