"""
Run parameters collected from the web form or the command line prompts.

Anything missing or malformed falls back to a default instead of being
rejected, so a half-filled form still starts a run.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from . import config

YEAR_PATTERN = re.compile(r"[0-9]{4}")
TEL_PATTERN = re.compile(r"0[0-9]{8,9}")


@dataclass(frozen=True)
class RunParams:
    dcr_month: str
    dcr_year: str
    tel: str
    run_times: int
    payer_relation: str


def buddhist_year(today: Optional[date] = None) -> int:
    today = today or date.today()
    return today.year + 543


def default_params(today: Optional[date] = None) -> RunParams:
    """Defaults shown on the form: this month, this BE year, one run, payer is the insured"""
    today = today or date.today()
    return RunParams(
        dcr_month=str(today.month),
        dcr_year=str(buddhist_year(today)),
        tel=config.DEFAULT_TEL,
        run_times=1,
        payer_relation=config.PAYER_SELF,
    )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_params(
    dcr_month: Any = None,
    dcr_year: Any = None,
    tel: Any = None,
    run_times: Any = None,
    payer_relation: Any = None,
    today: Optional[date] = None,
) -> RunParams:
    """Build RunParams from raw user input, substituting defaults for bad values"""
    defaults = default_params(today)

    month = _as_text(dcr_month) or defaults.dcr_month
    try:
        if not 1 <= int(month) <= 12:
            month = defaults.dcr_month
    except ValueError:
        month = defaults.dcr_month
    month = str(int(month))

    year = _as_text(dcr_year) or defaults.dcr_year
    if not YEAR_PATTERN.fullmatch(year):
        year = defaults.dcr_year

    phone = _as_text(tel) or defaults.tel
    if not TEL_PATTERN.fullmatch(phone):
        print(f"⚠️  Invalid phone number ({phone}), using default {defaults.tel}")
        phone = defaults.tel

    try:
        times = int(_as_text(run_times) or defaults.run_times)
    except ValueError:
        times = defaults.run_times
    if times < 1:
        times = defaults.run_times

    payer = _as_text(payer_relation) or defaults.payer_relation
    if payer not in config.PAYER_RELATIONS:
        payer = defaults.payer_relation

    return RunParams(
        dcr_month=month,
        dcr_year=year,
        tel=phone,
        run_times=times,
        payer_relation=payer,
    )


def describe(params: RunParams) -> str:
    return "\n".join([
        f"เลือกเดือน: {params.dcr_month}",
        f"เลือกปี: {params.dcr_year}",
        f"โทรศัพท์: {params.tel}",
        f"จำนวนรอบ: {params.run_times}",
        f"ความสัมพันธ์ผู้ชำระ: {params.payer_relation}",
    ])
