from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional


class ImmutableValueObject(BaseModel):
    """
    A base class for value objects to ensure they are immutable.
    Value objects are compared by their values, not their identity.
    """
    model_config = ConfigDict(frozen=True)


class Outfits(ImmutableValueObject):
    school_uniform: str = "Fukimori High School uniform"
    casual_wear: List[str] = Field(default_factory=list)
    special_outfits: List[str] = Field(default_factory=list)
    accessories: List[str] = Field(default_factory=list)


class Appearance(ImmutableValueObject):
    """
    Fixed cosmetic descriptors of a character.
    Only used to keep prompts and generated images consistent, never by game rules.
    """
    hair_color: str = "black"
    hair_style: str = "medium length"
    eye_color: str = "brown"
    height: str = "average"
    body_type: str = "average"
    distinctive_features: List[str] = Field(default_factory=list)
    outfits: Outfits = Field(default_factory=Outfits)
    physical_marks: List[str] = Field(default_factory=list)


class Personality(ImmutableValueObject):
    """The 'nature' of a character. Written once at creation time."""
    traits: List[str] = Field(default_factory=lambda: ["friendly"])
    likes: List[str] = Field(default_factory=list)
    dislikes: List[str] = Field(default_factory=list)
    fears: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    speech_pattern: str = "casual"
    core_values: List[str] = Field(default_factory=list)
    behavior_patterns: List[str] = Field(default_factory=list)
    social_style: str = "friendly"


class Parent(ImmutableValueObject):
    name: str = "Unknown"
    occupation: str = "unknown"
    personality: str = "unknown"


class Sibling(ImmutableValueObject):
    name: str
    age: int
    relationship: str # e.g. "older sister"


class Family(ImmutableValueObject):
    father: Parent = Field(default_factory=lambda: Parent(name="Unknown Father"))
    mother: Parent = Field(default_factory=lambda: Parent(name="Unknown Mother"))
    siblings: List[Sibling] = Field(default_factory=list)
    family_wealth: str = "middle class"
    family_reputation: str = "respectable"


class Background(ImmutableValueObject):
    family: Family = Field(default_factory=Family)
    home_address: str = "Unknown"
    room_description: str = "typical teenager room"
    economic_status: str = "middle class"
    backstory: str = ""
    secrets: List[str] = Field(default_factory=list)
    past_trauma: Optional[str] = None


class DailyRoutine(ImmutableValueObject):
    morning: str = "arrives at school early"
    lunch: str = "eats with friends"
    after_school: str = "participates in club activities"
    weekend: str = "relaxes at home"


class ReputationEffect(ImmutableValueObject):
    """The fixed reputation deltas an achievement applies when it is unlocked."""
    popularity_change: int = 0
    respect_change: int = 0
    fear_change: int = 0
    attractiveness_change: int = 0


class ReactionModifier(ImmutableValueObject):
    """
    How an NPC should colour its tone toward the player.
    Consumed by the dialogue generator, never applied to state.
    """
    attitude_shift: str = "normal"
    dialogue_modifier: str = "treats you normally"
    relationship_bonus: int = 0


class Threshold(ImmutableValueObject):
    """A single comparison against one reputation axis, e.g. `fear > 80`."""
    axis: str # popularity, respect, fear or attractiveness
    above: Optional[int] = None
    below: Optional[int] = None

    def matches(self, value: int) -> bool:
        if self.above is not None and not value > self.above:
            return False
        if self.below is not None and not value < self.below:
            return False
        return True
