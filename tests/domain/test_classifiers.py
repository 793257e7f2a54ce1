import pytest

from fukimori_engine.domain.classifiers import (
    CHARACTERISTIC_WEIGHT_RULES,
    classify_action,
    classify_experience,
)


@pytest.mark.parametrize("action, bucket, impact, sign", [
    ("helped a classmate", "positive", 3, 1),
    ("was RUDE to the teacher", "negative", -4, -1),
    ("told a funny joke", "playful", 2, 0),
    ("waved", "neutral", 0, 0),
])
def test_classify_action(action, bucket, impact, sign):
    rule = classify_action(action)

    assert rule.bucket == bucket
    assert rule.base_impact == impact
    assert rule.reputation_sign == sign


def test_first_matching_action_rule_wins():
    # "kind" is positive even though "mean" is also present.
    assert classify_action("a kind but mean remark").bucket == "positive"


@pytest.mark.parametrize("user_input, category, base_xp, skill", [
    ("Can we study together?", "academic", 15, "academics"),
    ("Hello there", "social", 12, "charm"),
    ("I love to draw", "creative", 14, "creativity"),
    ("Want to go to the gym?", "physical", 13, "athletics"),
    ("Let me help you", "empathy", 16, "empathy"),
    ("I will organize the festival", "leadership", 18, "leadership"),
    ("...", "general", 10, None),
])
def test_classify_experience(user_input, category, base_xp, skill):
    rule = classify_experience(user_input)

    assert rule.category == category
    assert rule.base_xp == base_xp
    assert rule.skill_category == skill


def test_characteristic_weight_rules_are_case_insensitive():
    athletics = next(r for r in CHARACTERISTIC_WEIGHT_RULES if r.characteristic == "athletics")
    assert athletics.matches("Player gained 13 XP from SPORTS practice")
