"""Domain models for user profiles and macro history."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class MacroValues:
    """Calories, protein, carbs and fat for a day, a goal or a meal."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }


MACRO_NAMES = ("calories", "protein", "carbs", "fat")


@dataclass(frozen=True)
class Profile:
    """A user's goals and today's running consumption."""

    id: UUID
    username: str | None
    avatar_url: str | None
    goals: MacroValues
    consumed: MacroValues
    consumed_updated_on: date | None


@dataclass(frozen=True)
class MacroHistoryEntry:
    """Daily macro totals for one user and one day."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float

    def to_json(self) -> dict[str, object]:
        return {
            "date": self.day.isoformat(),
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }

    @classmethod
    def from_json(cls, payload: dict[str, object]) -> "MacroHistoryEntry":
        return cls(
            day=date.fromisoformat(str(payload["date"])),
            calories=to_number(payload.get("calories")),
            protein=to_number(payload.get("protein")),
            carbs=to_number(payload.get("carbs")),
            fat=to_number(payload.get("fat")),
        )


def to_number(value: object) -> float:
    """Return a float, reading nulls as zero."""
    if value is None:
        return 0.0
    return float(value)
