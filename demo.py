# demo.py
#
# Demo: draw openers from the configured deck file
# and run them through the mulligan advisor.

import argparse
import random
from pprint import pprint

from deck_index import build_deck_index, draw_sample_hand, load_deck
from mulligan_advisor import analyze_mulligan
from settings import load_settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Evaluate sample openers from the deck file")
    parser.add_argument("--hands", type=int, default=3, help="Number of openers to draw")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible shuffle")
    args = parser.parse_args()

    settings = load_settings()
    deck = load_deck(settings.deck_path)
    deck_index = build_deck_index(deck)
    rng = random.Random(args.seed)

    print(f"Deck: {deck.deck_name} ({deck.main_count} main / {deck.side_count} side)")

    for i in range(1, args.hands + 1):
        hand = draw_sample_hand(deck, rng)
        advice = analyze_mulligan(hand, deck_index, config=settings.search_config())

        print(f"\n=== Opener {i} ===")
        for card in hand:
            print(f"  {card.name}")

        print(f"\nAdvisor says: {advice.decision.value}")
        for reason in advice.reasons:
            print(f"  - {reason}")

        print("\nBest line:")
        for step in advice.line:
            print(f"  {step}")

        pprint(advice.stats.model_dump(), sort_dicts=False)


if __name__ == "__main__":
    main()
