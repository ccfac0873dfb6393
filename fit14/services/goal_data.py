"""Goal selections and the goal data aggregate fed to plan generation.

Both types are immutable; every update returns a new value. The aggregate
keeps at most one selection per dimension because selections are keyed by
their ``GoalDimension``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Mapping, Optional

from fit14.services.goal_catalog import GoalDimension, GoalOption

FREE_TEXT_KEY = "free_form_goal"
TEXT_WEIGHT = 0.3
SELECTION_WEIGHT = 0.7

# One template per dimension and no fallback: a new dimension must add its phrase here.
PHRASE_TEMPLATES: dict[GoalDimension, str] = {
    GoalDimension.FITNESS_LEVEL: "I'm a {value}",
    GoalDimension.SEX: "I'm {value}",
    GoalDimension.PHYSICAL_STATS: "My physical stats: {value}",
    GoalDimension.TIME_AVAILABLE: "I can work out for {value} per session",
    GoalDimension.WORKOUT_LOCATION: "I'll be working out {value}",
    GoalDimension.WEEKLY_FREQUENCY: "I can work out {value}",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    stripped = text.strip()
    return stripped or None


@dataclass(frozen=True)
class GoalSelection:
    dimension: GoalDimension
    chosen_option: Optional[GoalOption] = None
    custom_text: Optional[str] = None
    selected_at: datetime = field(default_factory=_utcnow)

    def effective_value(self) -> Optional[str]:
        custom = _clean(self.custom_text)
        if custom is not None:
            return custom
        if self.chosen_option is None:
            return None
        return self.chosen_option.value

    def display_text(self) -> Optional[str]:
        custom = _clean(self.custom_text)
        if custom is not None:
            return custom
        if self.chosen_option is None:
            return None
        return self.chosen_option.display_text

    def is_valid(self) -> bool:
        return self.effective_value() is not None

    def natural_language_phrase(self) -> Optional[str]:
        value = self.effective_value()
        if value is None:
            return None
        return PHRASE_TEMPLATES[self.dimension].format(value=value)

    def to_dict(self) -> dict:
        return {
            "dimension": self.dimension.value,
            "chosenOption": self.chosen_option.to_dict() if self.chosen_option else None,
            "customText": self.custom_text,
            "selectedAt": self.selected_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GoalSelection":
        option = data.get("chosenOption")
        return cls(
            dimension=GoalDimension(data["dimension"]),
            chosen_option=GoalOption.from_dict(option) if option else None,
            custom_text=data.get("customText"),
            selected_at=datetime.fromisoformat(data["selectedAt"]),
        )


@dataclass(frozen=True)
class GoalDataAggregate:
    free_text: str = ""
    selections: Mapping[GoalDimension, GoalSelection] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utcnow)
    last_modified_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        for dimension, selection in self.selections.items():
            if selection.dimension is not dimension:
                raise ValueError(
                    f"Selection for {selection.dimension.value} stored under {dimension.value}"
                )
        object.__setattr__(self, "selections", dict(self.selections))

    # -- Updates (each returns a new aggregate) --

    def update_free_text(self, text: str, now: Optional[datetime] = None) -> "GoalDataAggregate":
        return replace(self, free_text=text, last_modified_at=now or _utcnow())

    def set_selection(
        self,
        dimension: GoalDimension,
        option: Optional[GoalOption] = None,
        custom_text: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "GoalDataAggregate":
        stamp = now or _utcnow()
        selections = dict(self.selections)
        selections[dimension] = GoalSelection(
            dimension=dimension, chosen_option=option, custom_text=custom_text, selected_at=stamp
        )
        return replace(self, selections=selections, last_modified_at=stamp)

    def clear_selection(self, dimension: GoalDimension, now: Optional[datetime] = None) -> "GoalDataAggregate":
        selections = {d: s for d, s in self.selections.items() if d is not dimension}
        return replace(self, selections=selections, last_modified_at=now or _utcnow())

    def reset(self, now: Optional[datetime] = None) -> "GoalDataAggregate":
        return replace(self, free_text="", selections={}, last_modified_at=now or _utcnow())

    # -- Queries --

    def selection_for(self, dimension: GoalDimension) -> Optional[GoalSelection]:
        return self.selections.get(dimension)

    def valid_selections(self) -> list[GoalSelection]:
        """Valid selections in stable dimension order."""
        return [
            self.selections[d]
            for d in GoalDimension
            if d in self.selections and self.selections[d].is_valid()
        ]

    @property
    def has_free_text(self) -> bool:
        return bool(self.free_text.strip())

    def completeness_score(self) -> float:
        text_score = TEXT_WEIGHT if self.has_free_text else 0.0
        selection_score = SELECTION_WEIGHT * len(self.valid_selections()) / len(GoalDimension)
        return max(0.0, min(1.0, text_score + selection_score))

    def is_sufficient_for_generation(self, strict: bool = False) -> bool:
        if not self.has_free_text:
            return False
        if strict:
            return len(self.valid_selections()) >= 2
        return True

    def validation_issues(self) -> list[str]:
        issues: list[str] = []
        if not self.has_free_text:
            issues.append("Please describe your fitness goal")
        for dimension in GoalDimension:
            if not dimension.is_required:
                continue
            selection = self.selections.get(dimension)
            if selection is None or not selection.is_valid():
                issues.append(f"Please select your {dimension.display_title.lower()}")
        return issues

    def structured_summary(self) -> dict[str, str]:
        summary = {s.dimension.value: s.effective_value() for s in self.valid_selections()}
        summary[FREE_TEXT_KEY] = self.free_text.strip()
        return summary

    def selection_phrases(self) -> list[str]:
        return [s.natural_language_phrase() for s in self.valid_selections()]

    def complete_goal_text(self) -> str:
        chip_text = ". ".join(self.selection_phrases())
        user_text = self.free_text.strip()
        if not chip_text:
            return user_text
        if not user_text:
            return chip_text
        return f"{chip_text}. {user_text}"

    # -- Serialization --

    def to_dict(self) -> dict:
        return {
            "freeText": self.free_text,
            "selections": {
                d.value: self.selections[d].to_dict() for d in GoalDimension if d in self.selections
            },
            "createdAt": self.created_at.isoformat(),
            "lastModifiedAt": self.last_modified_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GoalDataAggregate":
        selections = {
            GoalDimension(key): GoalSelection.from_dict(value)
            for key, value in (data.get("selections") or {}).items()
        }
        return cls(
            free_text=data.get("freeText") or "",
            selections=selections,
            created_at=datetime.fromisoformat(data["createdAt"]),
            last_modified_at=datetime.fromisoformat(data["lastModifiedAt"]),
        )
