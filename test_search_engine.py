from typing import Iterator

import search_engine

from action_generator import SearchContext, legal_actions
from game_state import SearchState
from scoring import StateScore, evaluate_state
from search_engine import SearchConfig, SearchResult, build_root_states, search_best_line


def _reachable(hand, deck_index, depth_limit=18) -> Iterator[SearchState]:
    context = SearchContext(deck_index=deck_index)
    for root in build_root_states(hand):
        seen = set()
        stack = [(root, 0)]
        while stack:
            state, depth = stack.pop()
            key = state.canonical_key()
            if key in seen:
                continue
            seen.add(key)
            yield state
            if depth < depth_limit:
                stack.extend((a.apply(state), depth + 1) for a in legal_actions(state, context))


def test_roots_per_distinct_land(hand_of) -> None:
    hand = hand_of("Island", "Island", "Swamp", "Mox Jet", "Ponder", "Force of Will", "Tinker")
    roots = build_root_states(hand)

    assert [r.chosen_land.name for r in roots] == ["Island", "Swamp"]
    for root in roots:
        assert root.trace[0] == "Start (0-cost artifacts played: Mox Jet)"
        assert root.battlefield[0].name == "Mox Jet"
        assert all(p.from_hand for p in root.battlefield)
        assert root.cards_accounted() == 7

    island_root = roots[0]
    assert island_root.trace[1] == "Play land: Island"
    assert island_root.hand_names.count("Island") == 1


def test_landless_root(hand_of) -> None:
    hand = hand_of("Ponder", "Brainstorm", "Force of Will", "Tinker", "Time Walk", "Windfall", "Mana Drain")
    (root,) = build_root_states(hand)
    assert root.chosen_land is None
    assert root.trace == ("Start (0-cost artifacts played: none)", "No land in hand")
    assert len(root.hand) == 7


def test_card_count_conservation(hand_of, deck_index) -> None:
    hand = hand_of("Black Lotus", "Mox Sapphire", "Island", "Crop Rotation", "Sol Ring", "Ponder", "Tinker")
    states = list(_reachable(hand, deck_index))
    assert len(states) > 10
    for state in states:
        assert state.cards_accounted() == 7, state.trace


def test_conservation_outside_bounce_branches(hand_of, deck_index) -> None:
    hand = hand_of("Mox Jet", "Mox Sapphire", "Black Lotus", "Paradoxical Outcome", "Sol Ring", "Island", "Ponder")
    checked = 0
    for state in _reachable(hand, deck_index):
        if "Paradoxical Outcome" in state.cast_history:
            continue
        assert state.cards_accounted() == 7, state.trace
        checked += 1
    assert checked > 0


def test_tap_orders_converge_on_one_key(hand_of, deck_index) -> None:
    (root,) = build_root_states(hand_of("Mox Jet", "Mox Sapphire", "Island", "Force of Will"))
    context = SearchContext(deck_index=deck_index)

    def tap(state, label):
        return next(a for a in legal_actions(state, context) if a.label == label).apply(state)

    jet_first = tap(tap(root, "Tap Mox Jet for B"), "Tap Mox Sapphire for U")
    sapphire_first = tap(tap(root, "Tap Mox Sapphire for U"), "Tap Mox Jet for B")
    assert jet_first.trace != sapphire_first.trace
    assert jet_first.canonical_key() == sapphire_first.canonical_key()


def test_each_key_is_scored_once_per_root(hand_of, deck_index, monkeypatch) -> None:
    scored_keys = []

    def counting_evaluate(state, *args, **kwargs):
        scored_keys.append(state.canonical_key())
        return evaluate_state(state, *args, **kwargs)

    monkeypatch.setattr(search_engine, "evaluate_state", counting_evaluate)

    # Single land, so a single root: taps in either order reach the same states.
    hand = hand_of("Mox Jet", "Mox Sapphire", "Mox Ruby", "Island", "Sol Ring", "Ponder", "Force of Will")
    result = search_best_line(hand, deck_index)

    assert len(scored_keys) == len(set(scored_keys))
    assert result.visited == len(scored_keys)
    assert len(scored_keys) == sum(1 for _ in _reachable(hand, deck_index))


def test_search_is_deterministic(hand_of, deck_index) -> None:
    hand = hand_of("Black Lotus", "Mox Jet", "Swamp", "Demonic Tutor", "Time Vault", "Ponder", "Island")
    first = search_best_line(hand, deck_index)
    second = search_best_line(hand, deck_index)
    assert (first.score, first.tier, first.fired, first.line) == (second.score, second.tier, second.fired, second.line)


def test_depth_limit_zero_scores_roots_only(hand_of, deck_index) -> None:
    hand = hand_of("Island", "Swamp", "Ponder", "Brainstorm", "Force of Will", "Tinker", "Time Walk")
    result = search_best_line(hand, deck_index, config=SearchConfig(depth_limit=0))
    assert result.visited == 2
    assert result.line[0] == "Start (0-cost artifacts played: none)"
    assert len(result.line) == 2


def test_best_line_prefers_casting_selection(hand_of, deck_index) -> None:
    hand = hand_of("Island", "Island", "Island", "Island", "Ponder", "Dig Through Time", "Memory Jar")
    result = search_best_line(hand, deck_index)
    assert result.tier == 1
    assert "Cast Ponder" in result.line
    assert "cast_selection" in result.fired


def test_improves_on_uses_tier_as_tie_break() -> None:
    best = SearchResult(best_state=SearchState(), score=100, tier=1)
    assert best.improves_on(StateScore(score=101, tier=0, fired=[]))
    assert best.improves_on(StateScore(score=100, tier=2, fired=[]))
    assert not best.improves_on(StateScore(score=100, tier=1, fired=[]))
    assert not best.improves_on(StateScore(score=99, tier=3, fired=[]))
    assert SearchResult().improves_on(StateScore(score=0, tier=0, fired=[]))
