from pydantic import BaseModel, Field
from typing import Dict, List, Optional

CHARACTERISTICS = (
    "academics",
    "athletics",
    "charm",
    "creativity",
    "reputation",
    "courage",
    "empathy",
    "leadership",
)

STARTING_EXPERIENCE_TO_NEXT = 100
LEVEL_XP_GROWTH = 1.2
SKILL_XP_PER_LEVEL = 50
CHARACTERISTIC_LEVEL_UP_BONUS = 5

# One-time unlocks granted when the player reaches the level.
ACTION_UNLOCKS_BY_LEVEL = {3: "join_club", 5: "ask_on_date", 7: "start_rumors", 10: "organize_event"}
SKILL_UNLOCKS_BY_LEVEL = {4: "persuasion", 6: "art", 8: "martial_arts", 12: "supernatural_control"}
CAPACITY_BONUS_LEVEL_INTERVAL = 3
CAPACITY_BONUS = 2

STARTING_ACTIONS = ["study", "exercise", "socialize", "explore_school"]
STARTING_ITEMS = ["school_bag", "pencil", "notebook"]
STARTING_MONEY = 1000 # yen
STARTING_INVENTORY_CAPACITY = 10

# Skill name -> unlocked at the start of the game.
STARTING_SKILLS = {
    # Academic
    "mathematics": True,
    "literature": True,
    "science": True,
    "history": True,
    # Social
    "persuasion": False,
    "intimidation": False,
    "diplomacy": False,
    "comedy": False,
    # Physical
    "martial_arts": False,
    "athletics": True,
    "dancing": False,
    # Creative
    "art": False,
    "music": False,
    "writing": False,
    "photography": False,
    # Special
    "supernatural_control": False,
    "meditation": False,
    "investigation": False,
}


class Characteristics(BaseModel):
    academics: int = Field(default=50, ge=0, le=100)
    athletics: int = Field(default=50, ge=0, le=100)
    charm: int = Field(default=50, ge=0, le=100)
    creativity: int = Field(default=50, ge=0, le=100)
    reputation: int = Field(default=50, ge=0, le=100)
    courage: int = Field(default=50, ge=0, le=100)
    empathy: int = Field(default=50, ge=0, le=100)
    leadership: int = Field(default=50, ge=0, le=100)

    def get(self, name: str) -> int:
        if name not in CHARACTERISTICS:
            raise ValueError(f"Unknown characteristic '{name}'.")
        return getattr(self, name)

    def improve(self, name: str, amount: int) -> int:
        value = max(0, min(100, self.get(name) + amount))
        setattr(self, name, value)
        return value


class SkillProgress(BaseModel):
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    unlocked: bool = False


def _starting_skills() -> Dict[str, SkillProgress]:
    return {name: SkillProgress(unlocked=unlocked) for name, unlocked in STARTING_SKILLS.items()}


class Inventory(BaseModel):
    items: List[str] = Field(default_factory=lambda: list(STARTING_ITEMS))
    money: int = STARTING_MONEY
    special_items: List[str] = Field(default_factory=list) # not limited by capacity
    max_capacity: int = STARTING_INVENTORY_CAPACITY

    @property
    def is_full(self) -> bool:
        return len(self.items) >= self.max_capacity


class PlayerStats(BaseModel):
    """The player's level, characteristics, skills and possessions."""
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    experience_to_next: int = STARTING_EXPERIENCE_TO_NEXT
    characteristics: Characteristics = Field(default_factory=Characteristics)
    skills: Dict[str, SkillProgress] = Field(default_factory=_starting_skills)
    inventory: Inventory = Field(default_factory=Inventory)
    unlocked_actions: List[str] = Field(default_factory=lambda: list(STARTING_ACTIONS))


class ExperienceGain(BaseModel):
    """
    A request to award experience. Validated before anything is mutated,
    so a negative amount never reaches the player's stats.
    """
    amount: int = Field(ge=0)
    source: str
    skill_category: Optional[str] = None
    description: str = ""


class LevelUpResult(BaseModel):
    leveled_up: bool = False
    new_level: Optional[int] = None
    levels_gained: int = 0
    characteristics_improved: List[str] = Field(default_factory=list)
    actions_unlocked: List[str] = Field(default_factory=list)
    skills_unlocked: List[str] = Field(default_factory=list)
    skill_levels_gained: int = 0
