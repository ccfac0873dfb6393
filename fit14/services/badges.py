"""Achievement badges unlocked by the number of completed challenges."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class BadgeRarity(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    LEGENDARY = "legendary"

    @property
    def sort_order(self) -> int:
        return list(BadgeRarity).index(self) + 1

    @property
    def display_name(self) -> str:
        return self.value.title()

    # str comparison would order alphabetically, so compare by tier instead
    def __lt__(self, other):
        if not isinstance(other, BadgeRarity):
            return NotImplemented
        return self.sort_order < other.sort_order

    def __le__(self, other):
        if not isinstance(other, BadgeRarity):
            return NotImplemented
        return self.sort_order <= other.sort_order

    def __gt__(self, other):
        if not isinstance(other, BadgeRarity):
            return NotImplemented
        return self.sort_order > other.sort_order

    def __ge__(self, other):
        if not isinstance(other, BadgeRarity):
            return NotImplemented
        return self.sort_order >= other.sort_order


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    unlock_threshold: int
    rarity: BadgeRarity

    def is_earned(self, completion_count: int) -> bool:
        return completion_count >= self.unlock_threshold

    def progress(self, completion_count: int) -> float:
        """Fraction of the way to unlocking, capped at 1.0."""
        if self.unlock_threshold <= 0:
            return 1.0
        return min(max(completion_count, 0) / self.unlock_threshold, 1.0)

    def remaining_to_unlock(self, completion_count: int) -> int:
        return max(0, self.unlock_threshold - completion_count)


ALL_BADGES: tuple[Badge, ...] = (
    Badge(
        "first_steps", "First Steps",
        "Completed your very first 2-week challenge! Every journey begins with a single step.",
        1, BadgeRarity.BRONZE,
    ),
    Badge(
        "building_momentum", "Building Momentum",
        "Two challenges down! You're proving that consistency is your superpower.",
        2, BadgeRarity.BRONZE,
    ),
    Badge(
        "habit_former", "Habit Former",
        "Three challenges completed! You're officially building lasting fitness habits.",
        3, BadgeRarity.SILVER,
    ),
    Badge(
        "fitness_champion", "Fitness Champion",
        "Five challenges conquered! Your dedication is truly inspiring.",
        5, BadgeRarity.SILVER,
    ),
    Badge(
        "consistency_crown", "Consistency Crown",
        "Seven challenges! You've shown that consistency is the crown jewel of fitness.",
        7, BadgeRarity.GOLD,
    ),
    Badge(
        "perfect_ten", "Perfect Ten",
        "Ten challenges completed! You've reached double digits and proven your commitment.",
        10, BadgeRarity.GOLD,
    ),
    Badge(
        "fitness_legend", "Fitness Legend",
        "Fifteen challenges! You're writing your own fitness legend, one challenge at a time.",
        15, BadgeRarity.PLATINUM,
    ),
    Badge(
        "ultimate_warrior", "Ultimate Warrior",
        "Twenty challenges! You've achieved ultimate warrior status with unmatched dedication.",
        20, BadgeRarity.LEGENDARY,
    ),
    Badge(
        "unstoppable_force", "Unstoppable Force",
        "Twenty-five challenges! You are truly an unstoppable force of fitness excellence.",
        25, BadgeRarity.LEGENDARY,
    ),
)


def earned_badges(completion_count: int) -> list[Badge]:
    return [b for b in ALL_BADGES if b.is_earned(completion_count)]


def unearned_badges(completion_count: int) -> list[Badge]:
    return [b for b in ALL_BADGES if not b.is_earned(completion_count)]


def next_badge_to_unlock(completion_count: int) -> Optional[Badge]:
    return min(unearned_badges(completion_count), key=lambda b: b.unlock_threshold, default=None)


def newly_earned_badges(previous_count: int, current_count: int) -> list[Badge]:
    previous_ids = {b.id for b in earned_badges(previous_count)}
    new = [b for b in earned_badges(current_count) if b.id not in previous_ids]
    for badge in new:
        logger.info(
            "Badge earned: %s", badge.name,
            extra={"ctx_badge_id": badge.id, "ctx_rarity": badge.rarity.value},
        )
    return new


def badges_by_rarity(rarity: BadgeRarity) -> list[Badge]:
    return [b for b in ALL_BADGES if b.rarity is rarity]


def motivational_message(completion_count: int) -> str:
    badge = next_badge_to_unlock(completion_count)
    if badge is None:
        return "Incredible! You've earned all available badges!"
    remaining = badge.remaining_to_unlock(completion_count)
    plural = "" if remaining == 1 else "s"
    return f"Just {remaining} more challenge{plural} to unlock {badge.name}!"
