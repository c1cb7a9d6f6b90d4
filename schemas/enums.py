"""Enums for profile and plan fields."""

from enum import Enum


class Goal(str, Enum):
    """Training goal submitted at onboarding."""
    MUSCLE = "muscle"
    FAT_LOSS = "fat_loss"
    STRENGTH = "strength"
    FITNESS = "fitness"


class EquipmentType(str, Enum):
    """Equipment class available to the user."""
    FULL_GYM = "full_gym"
    DUMBBELLS = "dumbbells"
    BODYWEIGHT = "bodyweight"


class Gender(str, Enum):
    """Self-reported gender."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class PlanGoal(str, Enum):
    """Goal label used by the editable day plan."""
    STRENGTH = "Strength"
    HYPERTROPHY = "Hypertrophy"
    FAT_LOSS = "Fat Loss"


class Experience(str, Enum):
    """Training experience picked during quick onboarding."""
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class PlanEquipment(str, Enum):
    """Equipment label used by the editable day plan."""
    FULL_GYM = "Full Gym"
    HOME = "Home"
    MINIMAL = "Minimal"
