from datetime import datetime

import pytz


class TimeManager:
    @staticmethod
    def get_time_now() -> datetime:
        return datetime.now(pytz.UTC)
