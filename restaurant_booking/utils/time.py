from datetime import date, datetime
from zoneinfo import ZoneInfo

JST = ZoneInfo("Asia/Tokyo")


def today_in(zone: ZoneInfo = JST) -> date:
    """Calendar date at the shop, which may differ from the server's local date."""
    return datetime.now(zone).date()
