from datetime import date

import pytest

from zenned.importer.prompts import (
    build_prompt,
    day_abbreviation,
    resolve_anchor_date,
)

TODAY = date(2024, 3, 10)


def test_prompt_embeds_current_and_anchor_dates():
    prompt = build_prompt("Plan my exam week", TODAY, "2024-03-13")
    assert prompt.anchor_date == "2024-03-13"
    assert prompt.current_date == "2024-03-10"
    assert "Current date: 2024-03-10 (Sun)" in prompt.system_prompt
    assert "Anchor date: 2024-03-13 (Wed)" in prompt.system_prompt
    assert "The first line must be the anchor date 2024-03-13 (Wed)." in prompt.system_prompt


def test_system_prompt_fixes_line_grammar_and_rules():
    system = build_prompt("anything", TODAY).system_prompt
    assert "<DayAbbrev> (<YYYY-MM-DD>)/<Title> :: <description> (<HH:MM>-<HH:MM>)" in system
    assert "never decrease" in system
    assert "placeholders" in system
    assert "commentary" in system
    assert "{ANCHOR" not in system and "{TODAY" not in system


def test_user_prompt_appends_hard_instruction():
    prompt = build_prompt("  Study chemistry every evening  ", TODAY)
    assert prompt.user_prompt.startswith("Study chemistry every evening\n\n")
    assert "quotation marks" in prompt.user_prompt
    assert "follow the line format exactly" in prompt.user_prompt


@pytest.mark.parametrize("anchor", [None, "", "03/13/2024", "2024-3-13", "2024-02-30", 20240313])
def test_bad_anchor_falls_back_to_current_date(anchor):
    assert resolve_anchor_date(anchor, TODAY) == TODAY
    assert build_prompt("x", TODAY, anchor).anchor_date == "2024-03-10"


@pytest.mark.parametrize("value,expected", [
    (date(2024, 3, 10), "Sun"),
    (date(2024, 3, 11), "Mon"),
    (date(2024, 3, 16), "Sat"),
])
def test_day_abbreviation(value, expected):
    assert day_abbreviation(value) == expected
