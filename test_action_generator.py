from action_generator import ActionKind, SearchContext, cast_card, legal_actions
from deck_index import DeckIndex
from game_state import Card, SearchState, new_permanent
from mana_pool import EMPTY_POOL, ManaPool


def _state(hand=(), battlefield=(), pool=EMPTY_POOL, tapped=()) -> SearchState:
    perms = tuple(new_permanent(c).model_copy(update={"tapped": c.name in tapped}) for c in battlefield)
    return SearchState(hand=tuple(hand), battlefield=perms, pool=pool)


def _labels(state, context=SearchContext()):
    return [a.label for a in legal_actions(state, context)]


def test_casts_come_before_taps(cards) -> None:
    state = _state(hand=[cards["Ponder"]], battlefield=[cards["Island"]], pool=ManaPool(U=1))
    actions = legal_actions(state)
    assert [a.kind for a in actions] == [ActionKind.CAST, ActionKind.TAP]
    assert [a.label for a in actions] == ["Cast Ponder", "Tap Island for U"]


def test_only_important_cards_are_cast(cards) -> None:
    state = _state(hand=[cards["Force of Will"], cards["Dig Through Time"]], pool=ManaPool(flex=10))
    assert _labels(state) == []


def test_unpayable_cast_is_not_offered(cards) -> None:
    state = _state(hand=[cards["Demonic Tutor"]], pool=ManaPool(U=2))
    assert _labels(state) == []


def test_forced_free_cast_keeps_pool(cards) -> None:
    state = _state(hand=[cards["Gitaxian Probe"]])
    (action,) = legal_actions(state)
    after = action.apply(state)
    assert after.pool == EMPTY_POOL
    assert after.cast_history == ("Gitaxian Probe",)
    assert after.hand == ()


def test_cast_is_pure_and_moves_artifacts(cards) -> None:
    state = _state(hand=[cards["Sol Ring"], cards["Ponder"]], pool=ManaPool(C=1, U=1))
    after = cast_card(state, cards["Sol Ring"], SearchContext())

    assert after.hand_names == ["Ponder"]
    assert after.battlefield_names == ["Sol Ring"]
    assert after.pool == ManaPool(U=1)
    assert after.trace[-1] == "Cast Sol Ring"

    # original state untouched
    assert state.hand_names == ["Sol Ring", "Ponder"]
    assert state.battlefield == ()
    assert state.pool == ManaPool(C=1, U=1)


def test_sorcery_does_not_enter_battlefield(cards) -> None:
    state = _state(hand=[cards["Ponder"]], pool=ManaPool(U=1))
    after = cast_card(state, cards["Ponder"], SearchContext())
    assert after.battlefield == ()
    assert after.pool == EMPTY_POOL


def test_tap_marks_permanent_and_adds_mana(cards) -> None:
    state = _state(battlefield=[cards["Mox Jet"], cards["Mana Crypt"]])
    jet, crypt = legal_actions(state)
    after = crypt.apply(jet.apply(state))
    assert after.pool == ManaPool(B=1, C=2)
    assert all(p.tapped for p in after.battlefield)
    assert after.trace[-2:] == ("Tap Mox Jet for B", "Tap Mana Crypt for CC")


def test_tapped_and_inert_permanents_have_no_actions(cards) -> None:
    widget = Card(name="Made Up Widget", mana_cost="{2}", type_line="Artifact")
    state = _state(battlefield=[cards["Sol Ring"], widget, cards["Time Vault"]], tapped=("Sol Ring",))
    assert _labels(state) == []


def test_dual_mode_land_offers_two_actions(cards) -> None:
    state = _state(battlefield=[cards["Starting Town"]])
    actions = legal_actions(state)
    assert len(actions) == 2
    assert actions[0].apply(state).pool == ManaPool(C=1)
    flex = actions[1].apply(state)
    assert flex.pool == ManaPool(flex=1)
    assert flex.trace[-1] == "Tap Starting Town for any color (pay 1 life)"


def test_multi_color_land_offers_one_action_per_color(cards) -> None:
    tundra = Card(name="Volcanic Island", type_line="Land", produced_mana=("U", "R"))
    state = _state(battlefield=[tundra])
    assert _labels(state) == ["Tap Volcanic Island for U", "Tap Volcanic Island for R"]


def test_catalog_artifact_taps_for_declared_colors() -> None:
    diamond = Card(name="Mox Diamond", mana_cost="{0}", type_line="Artifact", produced_mana=("U", "B"))
    state = _state(battlefield=[diamond])
    assert _labels(state) == ["Tap Mox Diamond for U", "Tap Mox Diamond for B"]

    after = legal_actions(state)[1].apply(state)
    assert after.pool == ManaPool(B=1)


def test_academy_scales_with_artifacts(cards) -> None:
    state = _state(battlefield=[cards["Tolarian Academy"], cards["Mox Jet"], cards["Time Vault"]], tapped=("Mox Jet",))
    (tap,) = legal_actions(state)
    after = tap.apply(state)
    assert after.pool == ManaPool(U=2)
    assert after.trace[-1] == "Tap Academy for 2U (artifacts: 2)"


def test_mox_opal_needs_metalcraft(cards) -> None:
    two = _state(battlefield=[cards["Mox Opal"], cards["Time Vault"]])
    assert _labels(two) == []

    three = _state(battlefield=[cards["Mox Opal"], cards["Time Vault"], cards["Voltaic Key"]])
    assert _labels(three) == ["Tap Mox Opal for any color (metalcraft)"]


def test_one_shot_source_is_sacrificed(cards) -> None:
    state = _state(battlefield=[cards["Black Lotus"]])
    (sac,) = legal_actions(state)
    after = sac.apply(state)
    assert after.battlefield == ()
    assert [p.name for p in after.graveyard] == ["Black Lotus"]
    assert after.pool == ManaPool(flex=3)
    assert after.trace[-1] == "Sac Black Lotus for 3 mana"


def test_paradoxical_outcome_bounces_and_replays(cards) -> None:
    state = _state(
        hand=[cards["Paradoxical Outcome"]],
        battlefield=[cards["Mox Jet"], cards["Sol Ring"], cards["Island"]],
        pool=ManaPool(U=1, C=2, B=1),
        tapped=("Mox Jet", "Sol Ring", "Island"),
    )
    after = cast_card(state, cards["Paradoxical Outcome"], SearchContext())

    assert after.hand_names == ["Sol Ring"]
    assert sorted(after.battlefield_names) == ["Island", "Mox Jet"]
    assert not next(p for p in after.battlefield if p.name == "Mox Jet").tapped
    assert after.trace[-1] == "PO → bounce 2 artifacts, draw 2, replay 1 free artifacts"
    # hand + battlefield after the bounce match the totals right after casting
    assert len(after.hand) + len(after.battlefield) == (len(state.hand) - 1) + len(state.battlefield)


def test_crop_rotation_fetches_academy(cards, deck_index) -> None:
    state = _state(
        hand=[cards["Crop Rotation"]],
        battlefield=[cards["Island"], cards["Mox Jet"], cards["Mox Ruby"]],
        pool=ManaPool(flex=1),
    )
    after = cast_card(state, cards["Crop Rotation"], SearchContext(deck_index=deck_index))

    assert "Island" not in after.battlefield_names
    assert "Tolarian Academy" in after.battlefield_names
    assert [p.name for p in after.graveyard] == ["Island"]
    assert after.trace[-1] == "Crop Rotation → sacrifice Island, fetch Tolarian Academy (2 artifacts)"


def test_crop_rotation_needs_academy_in_deck(cards) -> None:
    state = _state(
        hand=[cards["Crop Rotation"]],
        battlefield=[cards["Island"], cards["Mox Jet"], cards["Mox Ruby"]],
        pool=ManaPool(flex=1),
    )
    after = cast_card(state, cards["Crop Rotation"], SearchContext(deck_index=DeckIndex.from_names(["Island"])))
    assert "Island" in after.battlefield_names
    assert after.graveyard == ()


def test_tinker_assumes_blightsteel(cards, deck_index) -> None:
    state = _state(hand=[cards["Tinker"]], battlefield=[cards["Mox Jet"]], pool=ManaPool(U=1, C=2))
    after = cast_card(state, cards["Tinker"], SearchContext(deck_index=deck_index))
    assert after.assumptions == ("tinker_blightsteel",)
    assert "Tinker → Blightsteel Colossus (artifact to sacrifice assumed)" in after.trace


def test_tinker_needs_an_artifact_to_sacrifice(cards, deck_index) -> None:
    state = _state(hand=[cards["Tinker"]], battlefield=[cards["Island"]], pool=ManaPool(U=1, C=2))
    after = cast_card(state, cards["Tinker"], SearchContext(deck_index=deck_index))
    assert after.assumptions == ()


def test_tinker_for_time_vault_with_key_in_hand(cards) -> None:
    index = DeckIndex.from_names(["Time Vault", "Voltaic Key"])
    state = _state(
        hand=[cards["Tinker"], cards["Voltaic Key"]],
        battlefield=[cards["Mox Jet"]],
        pool=ManaPool(U=1, C=3),
    )
    after = cast_card(state, cards["Tinker"], SearchContext(deck_index=index))
    assert after.assumptions == ("tinker_time_vault",)

    broke = state.model_copy(update={"pool": ManaPool(U=1, C=2)})
    assert cast_card(broke, cards["Tinker"], SearchContext(deck_index=index)).assumptions == ()


def test_tinker_for_key_with_vault_in_hand(cards) -> None:
    index = DeckIndex.from_names(["Time Vault", "Manifold Key"])
    state = _state(
        hand=[cards["Tinker"], cards["Time Vault"]],
        battlefield=[cards["Mox Jet"]],
        pool=ManaPool(U=1, C=5),
    )
    after = cast_card(state, cards["Tinker"], SearchContext(deck_index=index))
    assert after.assumptions == ("tinker_key",)
    assert after.trace[-1] == "Tinker → Manifold Key (into play), cast Vault, activate combo (infinite turns)"
