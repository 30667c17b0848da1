"""
Handle Value Object
Case-insensitive login name
"""
import re
from dataclasses import dataclass

HANDLE_MIN_LENGTH = 3
HANDLE_MAX_LENGTH = 30


@dataclass(frozen=True)
class Handle:
    """User handle: 3-30 letters, digits or underscores, stored lower-cased"""

    value: str

    def __post_init__(self):
        normalized = (self.value or "").strip().lower()
        if not self.is_valid(normalized):
            raise ValueError(
                f"Handle must be {HANDLE_MIN_LENGTH}-{HANDLE_MAX_LENGTH} characters "
                "of letters, numbers and underscores"
            )
        object.__setattr__(self, "value", normalized)

    @staticmethod
    def is_valid(handle: str) -> bool:
        pattern = rf'^[a-zA-Z0-9_]{{{HANDLE_MIN_LENGTH},{HANDLE_MAX_LENGTH}}}$'
        return bool(re.match(pattern, handle))

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Handle({self.value})"
