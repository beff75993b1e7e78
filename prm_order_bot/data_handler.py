"""
Append-only success log and its history view
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

import pandas as pd

from . import config
from .data_generator import OrderRecord
from .error_handler import ErrorHandler

LINE_PATTERN = re.compile(
    r"^\[(?P<timestamp>[^\]]+)\] สำเร็จ \| ชื่อ: (?P<full_name>.+?) "
    r"\| เลขบัตรประชาชน: (?P<thai_id>\d+) \| App ID: (?P<app_id>\d+)$"
)
HISTORY_COLUMNS = ["timestamp", "full_name", "thai_id", "app_id"]


def thai_timestamp(now: Optional[datetime] = None) -> str:
    """Bangkok time in th-TH style: d/m/<BE year> H:MM:SS"""
    tz = ZoneInfo(config.TIMEZONE)
    now = now.astimezone(tz) if now else datetime.now(tz)
    return f"{now.day}/{now.month}/{now.year + 543} {now.hour}:{now.minute:02d}:{now.second:02d}"


def parse_thai_timestamp(text: str) -> Optional[datetime]:
    try:
        day_part, time_part = text.split(" ")
        day, month, be_year = (int(p) for p in day_part.split("/"))
        hour, minute, second = (int(p) for p in time_part.split(":"))
        return datetime(be_year - 543, month, day, hour, minute, second)
    except ValueError:
        return None


def format_log_line(data: OrderRecord, app_id: str, now: Optional[datetime] = None) -> str:
    return (
        f"[{thai_timestamp(now)}] สำเร็จ | ชื่อ: {data.full_name} "
        f"| เลขบัตรประชาชน: {data.thai_id} | App ID: {app_id}\n"
    )


class SuccessLog:
    def __init__(self, path: str = config.SUCCESS_LOG_FILE, error_handler: Optional[ErrorHandler] = None):
        self.path = Path(path)
        self.error_handler = error_handler

    def append(self, data: OrderRecord, app_id: str, now: Optional[datetime] = None) -> str:
        """Append one line per finished application"""
        line = format_log_line(data, app_id, now)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line)
        print(f"✓ Success logged to {self.path}")
        return line

    def load_history(self) -> pd.DataFrame:
        """Parse the log into a DataFrame; lines that do not match are skipped"""
        if not self.path.exists():
            return pd.DataFrame(columns=HISTORY_COLUMNS + ["run_at"])

        rows = []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                for line in f:
                    match = LINE_PATTERN.match(line.strip())
                    if match:
                        rows.append(match.groupdict())
        except OSError as e:
            if self.error_handler:
                self.error_handler.handle_file_error(e, str(self.path), "read")
            raise

        df = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
        df["run_at"] = pd.to_datetime(df["timestamp"].map(parse_thai_timestamp))
        return df

    def display_summary(self) -> Optional[pd.DataFrame]:
        df = self.load_history()
        if df.empty:
            print(f"⚠️  No successful runs recorded in {self.path}")
            return None

        print("\n" + "=" * 60)
        print("RUN HISTORY")
        print("=" * 60)
        print(f"Total applications: {len(df)}")
        per_day = df.groupby(df["run_at"].dt.date).size()
        for day, count in per_day.items():
            print(f"  {day}: {count}")

        print("\n--- Latest Entries ---")
        print(df[HISTORY_COLUMNS].tail(5).to_string(index=False))
        return df
