# restpact/fake_data.py
"""
Fake data generation for request payloads.

Values are drawn from a Faker instance owned by the generator. The random
source is explicit: pass ``seed`` (or a ``random.Random``) to get a
reproducible sequence, leave both unset for fresh data on every run.
"""

from __future__ import annotations

import logging
import random
from datetime import timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from faker import Faker

logger = logging.getLogger(__name__)


class DataKind(str, Enum):
    """Semantic kinds understood by ``FakeDataGenerator.generate``."""
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    FULL_NAME = "full_name"
    EMAIL = "email"
    USERNAME = "username"
    PASSWORD = "password"
    CITY = "city"
    STREET = "street"
    POSTAL_CODE = "postal_code"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    PHONE = "phone"
    SENTENCE = "sentence"
    SENTENCES = "sentences"
    PARAGRAPH = "paragraph"
    INTEGER = "integer"
    IMAGE_URL = "image_url"
    TIMESTAMP = "timestamp"
    UUID = "uuid"


class FakeDataGenerator:
    """Generate realistic test data using Faker"""

    def __init__(
        self,
        seed: Optional[int] = None,
        locale: str = "en_US",
        rng: Optional[random.Random] = None,
    ):
        self.faker = Faker(locale)
        if rng is not None:
            self.faker.random = rng
        elif seed is not None:
            self.faker.seed_instance(seed)
        self.seed = seed
        logger.debug(f"Fake data generator ready (locale={locale}, seed={seed}, injected rng={rng is not None})")

        self._generators: Dict[DataKind, Callable[..., Any]] = {
            DataKind.FIRST_NAME: self.first_name,
            DataKind.LAST_NAME: self.last_name,
            DataKind.FULL_NAME: self.full_name,
            DataKind.EMAIL: self.email,
            DataKind.USERNAME: self.username,
            DataKind.PASSWORD: self.password,
            DataKind.CITY: self.city,
            DataKind.STREET: self.street,
            DataKind.POSTAL_CODE: self.postal_code,
            DataKind.LATITUDE: self.latitude,
            DataKind.LONGITUDE: self.longitude,
            DataKind.PHONE: self.phone,
            DataKind.SENTENCE: self.sentence,
            DataKind.SENTENCES: self.sentences,
            DataKind.PARAGRAPH: self.paragraph,
            DataKind.INTEGER: self.integer,
            DataKind.IMAGE_URL: self.image_url,
            DataKind.TIMESTAMP: self.timestamp,
            DataKind.UUID: self.uuid,
        }

    def generate(self, kind: DataKind | str, **kwargs) -> Any:
        """Generate a value of the given kind; kwargs go to the kind's generator."""
        try:
            key = DataKind(kind)
        except ValueError:
            raise ValueError(f"Unknown data kind: {kind!r}") from None
        return self._generators[key](**kwargs)

    # ==================== People ====================

    def first_name(self) -> str:
        return self.faker.first_name()

    def last_name(self) -> str:
        return self.faker.last_name()

    def full_name(self) -> str:
        return self.faker.name()

    def email(self) -> str:
        return self.faker.email()

    def username(self) -> str:
        return self.faker.user_name()

    def password(self, length: int = 12) -> str:
        return self.faker.password(length=length)

    def phone(self) -> str:
        return self.faker.phone_number()

    # ==================== Location ====================

    def city(self) -> str:
        return self.faker.city()

    def street(self) -> str:
        return self.faker.street_name()

    def postal_code(self) -> str:
        return self.faker.postcode()

    # Faker returns Decimal here, which the JSON encoder rejects
    def latitude(self) -> float:
        return float(self.faker.latitude())

    def longitude(self) -> float:
        return float(self.faker.longitude())

    # ==================== Text ====================

    def sentence(self) -> str:
        return self.faker.sentence()

    def sentences(self, count: int = 2) -> str:
        return " ".join(self.faker.sentences(nb=count))

    def paragraph(self) -> str:
        return self.faker.paragraph()

    # ==================== Misc ====================

    def integer(self, min: int = 0, max: int = 1000) -> int:
        if min > max:
            raise ValueError(f"min ({min}) must not exceed max ({max})")
        return self.faker.random_int(min=min, max=max)

    def image_url(self, width: int = 640, height: int = 480) -> str:
        return self.faker.image_url(width=width, height=height)

    def timestamp(self) -> str:
        """ISO-8601 timestamp in UTC."""
        return self.faker.date_time(tzinfo=timezone.utc).isoformat()

    def uuid(self) -> str:
        return str(self.faker.uuid4())

    def isbn13(self) -> str:
        """
        ISBN-13 shaped identifier ``ddd-d-dd-dddddd-d``.

        Built from independent draws, so two calls can collide. Good enough to
        keep fixtures apart, not a real identifier.
        """
        segments = (
            self.integer(100, 999),
            self.integer(0, 9),
            self.integer(10, 99),
            self.integer(100000, 999999),
            self.integer(0, 9),
        )
        return "-".join(str(s) for s in segments)
