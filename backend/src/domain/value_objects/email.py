"""
Email Value Object
Reminder recipient address, trimmed and validated
"""
import re
from dataclasses import dataclass

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


@dataclass(frozen=True)
class Email:
    """Email value object; the domain part is lower-cased"""

    value: str

    def __post_init__(self):
        candidate = (self.value or "").strip()
        if not EMAIL_PATTERN.match(candidate):
            raise ValueError(f"Invalid email format: {self.value}")
        local, _, domain = candidate.rpartition("@")
        object.__setattr__(self, "value", f"{local}@{domain.lower()}")

    @property
    def domain(self) -> str:
        return self.value.rpartition("@")[2]

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email({self.value})"
