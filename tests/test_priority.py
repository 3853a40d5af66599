import pytest

from shalomhomes.services.priority import (
    MAX_CONFIDENCE,
    describe_suggestion,
    get_priority_confidence,
    suggest_priority,
)


@pytest.mark.parametrize(
    "description, expected",
    [
        ("Urgent gas leak in the basement", "high"),
        ("No water in apartment 3B", "high"),
        ("Minor cosmetic paint touch up", "low"),
        ("Would like a new doormat", "low"),
        ("Routine check of the lobby", "medium"),
        ("", "medium"),
    ],
)
def test_suggest_priority_keywords(description, expected):
    assert suggest_priority(description) == expected


def test_high_keywords_take_precedence_over_low():
    assert suggest_priority("Not urgent, paint the door when possible") == "high"


def test_matching_is_case_insensitive():
    assert suggest_priority("FLOOD in unit 4") == "high"
    assert suggest_priority("SMALL scuff on the wall") == "low"


def test_confidence_floor_for_short_descriptions():
    assert get_priority_confidence("") == 0.5
    assert get_priority_confidence("leak") == 0.5


def test_confidence_grows_with_length_and_is_capped():
    short = get_priority_confidence("x" * 10)
    medium = get_priority_confidence("x" * 50)
    long = get_priority_confidence("x" * 100)
    longer = get_priority_confidence("x" * 1000)

    assert short == pytest.approx(0.63)
    assert short < medium < long
    assert long == pytest.approx(0.9)
    assert longer == long
    assert longer <= MAX_CONFIDENCE


def test_describe_suggestion_message():
    priority, confidence, message = describe_suggestion("x" * 50 + " broken window")

    assert priority == "high"
    assert 0.6 < confidence < 0.95
    assert message == f"Suggested high priority ({round(confidence * 100)}% confidence)."
