"""
Synthetic Thai customer data for test orders
"""

import random
from dataclasses import dataclass, field
from typing import Iterable, Optional

from faker import Faker

_fake = Faker("th_TH")


@dataclass(frozen=True)
class OrderRecord:
    thai_id: str
    first_name: str
    last_name: str
    tel: str
    full_name: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "full_name", f"{self.first_name} {self.last_name}")


def thai_id_check_digit(first_twelve: str) -> int:
    """Check digit of a Thai national ID: weights 13..2 over the first 12 digits, mod 11"""
    total = sum(int(digit) * (13 - i) for i, digit in enumerate(first_twelve))
    return (11 - total % 11) % 10


def is_valid_thai_id(thai_id: str) -> bool:
    if len(thai_id) != 13 or not thai_id.isdigit() or thai_id[0] == "0":
        return False
    return thai_id_check_digit(thai_id[:12]) == int(thai_id[12])


def generate_thai_id(rng: Optional[random.Random] = None) -> str:
    """Generate a random 13-digit Thai national ID with a valid check digit"""
    rng = rng or random
    body = str(rng.randint(1, 8)) + "".join(str(rng.randint(0, 9)) for _ in range(11))
    return body + str(thai_id_check_digit(body))


def random_first_name(fake: Optional[Faker] = None) -> str:
    return (fake or _fake).first_name()


def random_last_name(fake: Optional[Faker] = None) -> str:
    return (fake or _fake).last_name()


def random_full_name(fake: Optional[Faker] = None, taken: Iterable[str] = ()) -> tuple:
    """
    Draw a first/last name pair whose full name is not in `taken`.

    Orders are looked up by customer name on the portal, so a name must not
    repeat within a run.
    """
    taken = set(taken)
    while True:
        first_name, last_name = random_first_name(fake), random_last_name(fake)
        if f"{first_name} {last_name}" not in taken:
            return first_name, last_name


def generate_order_data(tel: str, rng: Optional[random.Random] = None,
                        fake: Optional[Faker] = None, taken: Iterable[str] = ()) -> OrderRecord:
    """Fresh customer for one iteration"""
    first_name, last_name = random_full_name(fake, taken)
    record = OrderRecord(
        thai_id=generate_thai_id(rng),
        first_name=first_name,
        last_name=last_name,
        tel=tel,
    )
    print(f"✓ Generated customer: {record.full_name} ({record.thai_id})")
    return record
