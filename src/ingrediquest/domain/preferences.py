"""Domain model for user preferences."""

from dataclasses import dataclass, field, fields

SKILL_LEVELS = ("beginner", "intermediate", "advanced")
DEFAULT_PROFILE_PICTURE = "https://i.pravatar.cc/150"

_JSON_KEYS = {
    "is_dark_mode": "isDarkMode",
    "dietary_preferences": "dietaryPreferences",
    "cuisine_preferences": "cuisinePreferences",
    "cooking_skill_level": "cookingSkillLevel",
    "allergies": "allergies",
    "restrictions": "restrictions",
    "profile_picture": "profilePicture",
    "display_name": "displayName",
}


@dataclass(frozen=True)
class UserPreferences:
    """Device-local preference record.

    Values are stored as given: skill levels outside ``SKILL_LEVELS`` and
    arbitrary list contents are accepted.
    """

    dietary_preferences: list[str] = field(default_factory=list)
    cuisine_preferences: list[str] = field(default_factory=list)
    cooking_skill_level: str = "beginner"
    allergies: list[str] = field(default_factory=list)
    restrictions: list[str] = field(default_factory=list)
    is_dark_mode: bool = False
    profile_picture: str = DEFAULT_PROFILE_PICTURE
    display_name: str = ""


PREFERENCE_FIELDS = frozenset(item.name for item in fields(UserPreferences))


def parse_preferences(raw: object) -> UserPreferences:
    """Overlay a stored JSON record onto the defaults."""
    if not isinstance(raw, dict):
        raise ValueError("Preferences payload must be an object")
    values = {
        name: raw[json_key] for name, json_key in _JSON_KEYS.items() if json_key in raw
    }
    return UserPreferences(**values)


def dump_preferences(preferences: UserPreferences) -> dict[str, object]:
    """Serialize preferences to their JSON shape."""
    return {
        json_key: getattr(preferences, name) for name, json_key in _JSON_KEYS.items()
    }
