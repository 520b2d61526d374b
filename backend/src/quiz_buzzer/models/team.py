"""Team model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Team:
    """A quiz team, immutable once created."""

    id: str
    name: str
    color: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "color": self.color}
