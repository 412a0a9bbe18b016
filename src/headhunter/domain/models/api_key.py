"""API credential domain model"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ApiKey:
    """Named bearer credential for the game API"""

    name: str
    value: str

    def __repr__(self) -> str:
        return f"ApiKey(name={self.name!r})"
