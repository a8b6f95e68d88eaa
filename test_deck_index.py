import json
import random

import pytest

from cost_parser import ColorIdentity
from deck_index import (
    DeckIndex,
    DeckLoadError,
    deck_summary,
    draw_sample_hand,
    expand_mainboard,
    format_deck_as_text,
    load_deck,
    mana_value_columns,
)
from game_state import CardCategory


def test_deck_file_is_a_75(deck) -> None:
    assert deck.main_count == 60
    assert deck.side_count == 15


def test_index_membership(deck_index) -> None:
    assert deck_index.has_in_main("Blightsteel Colossus")
    assert deck_index.has_in_main("Tolarian Academy")
    assert not deck_index.has_in_main("Balance")
    assert deck_index.has_in_side("Balance")
    assert deck_index.card("Island").produced_mana == ("U",)
    assert deck_index.card("Not A Card") is None


def test_from_names() -> None:
    index = DeckIndex.from_names(["Time Vault"], ["Manifold Key"])
    assert index.has_in_main("Time Vault")
    assert index.has_in_side("Manifold Key")
    assert not index.has_in_main("Manifold Key")


def test_sample_hand_is_seeded(deck) -> None:
    first = draw_sample_hand(deck, random.Random(7))
    second = draw_sample_hand(deck, random.Random(7))
    assert len(first) == 7
    assert [c.name for c in first] == [c.name for c in second]


def test_sample_hand_respects_counts(deck) -> None:
    library = expand_mainboard(deck)
    assert len(library) == 60
    assert sum(1 for c in library if c.name == "Force of Will") == 4


def test_text_export(deck) -> None:
    text = format_deck_as_text(deck)
    main, side = text.strip("\n").split("\n\n")
    assert "4 Force of Will" in main.splitlines()
    assert "1 Balance" in side.splitlines()
    assert sum(int(line.split(" ", 1)[0]) for line in main.splitlines()) == 60


def test_mana_value_columns(deck) -> None:
    columns = mana_value_columns(deck)
    assert columns[0].label == "LANDS"
    assert columns[1].label == "CMC 0"
    assert "Black Lotus" in columns[1].cards
    assert columns[0].cards == sorted(columns[0].cards)
    assert sum(len(c.cards) for c in columns) == 60


def test_load_deck_errors(tmp_path) -> None:
    with pytest.raises(DeckLoadError):
        load_deck(tmp_path / "missing.json")

    bad_json = tmp_path / "bad.json"
    bad_json.write_text("{not json", encoding="utf-8")
    with pytest.raises(DeckLoadError):
        load_deck(bad_json)

    bad_schema = tmp_path / "schema.json"
    bad_schema.write_text(json.dumps({"mainboard": [{"count": 2}]}), encoding="utf-8")
    with pytest.raises(DeckLoadError):
        load_deck(bad_schema)


def test_deck_summary(deck) -> None:
    summary = deck_summary(deck)

    assert sum(summary.by_color.values()) == 60
    assert summary.by_color[ColorIdentity.LAND] == 13
    assert summary.by_color[ColorIdentity.BLACK] == 3
    assert summary.by_color[ColorIdentity.RED] == 1
    assert ColorIdentity.GREEN not in summary.by_color

    assert summary.by_category == {
        CardCategory.LAND: 13,
        CardCategory.ARTIFACT: 18,
        CardCategory.CREATURE: 1,
        CardCategory.SPELL: 28,
    }
