"""Base class for synthetic portfolio generators."""

from __future__ import annotations

import random
from abc import ABC
from datetime import date, timedelta

from faker import Faker


class BaseGenerator(ABC):
    """Shared Faker instance and seeding for portfolio generators.

    Seeding both Faker and the ``random`` module makes a whole portfolio
    reproducible from one integer.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``es_MX``).
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "es_MX",
    ) -> None:
        self.locale = locale
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)

    def new_id(self) -> str:
        """Random UUID string drawn from the seeded Faker instance."""
        return self.fake.uuid4()

    def date_in_window(
        self,
        reference_date: date,
        weeks_back: int,
        min_weeks_back: int = 1,
    ) -> date:
        """Random date between ``weeks_back`` and ``min_weeks_back`` weeks before a reference."""
        return self.fake.date_between_dates(
            date_start=reference_date - timedelta(weeks=weeks_back),
            date_end=reference_date - timedelta(weeks=min_weeks_back),
        )
