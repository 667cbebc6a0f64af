"""User ID value object"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserId:
    """Authenticated user identifier (the remote cart document key)"""

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("User ID must be a non-empty string")

    def __str__(self) -> str:
        return self.value
