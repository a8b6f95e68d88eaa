# scripts/update_csv.py
#
# Fetches card data for every card in the deck file from Scryfall,
# writes data/cards.csv in the format expected by import_from_csv.py.

import csv
import time
from pathlib import Path
from typing import Dict, Iterable, List

import requests

from card_roles import DEFAULT_ROLE_TABLE, RoleTable
from cost_parser import COLORED
from deck_index import load_deck

# Output CSV path
CSV_PATH = Path("data/cards.csv")
DECK_PATH = Path("data/grixis_tinker.json")

# Scryfall collection endpoint (max 75 identifiers per request)
COLLECTION_URL = "https://api.scryfall.com/cards/collection"
BATCH_SIZE = 75

FIELDNAMES = [
    "name",
    "mana_cost",
    "type_line",
    "produced_mana",
    "tags",
    "oracle_text",
    "set_name",
]


def deck_card_names(deck_path: Path) -> List[str]:
    """Unique card names in main + side, in deck order."""
    deck = load_deck(deck_path)
    names: List[str] = []
    for entry in deck.mainboard + deck.sideboard:
        if entry.card.name not in names:
            names.append(entry.card.name)
    return names


def fetch_cards(names: List[str]) -> List[Dict]:
    """Fetch Scryfall card objects for ``names`` in batches."""
    cards: List[Dict] = []
    batches = [names[i:i + BATCH_SIZE] for i in range(0, len(names), BATCH_SIZE)]

    for idx, batch in enumerate(batches, start=1):
        resp = requests.post(
            COLLECTION_URL,
            json={"identifiers": [{"name": n} for n in batch]},
            timeout=20,
        )
        resp.raise_for_status()
        data = resp.json()

        for missing in data.get("not_found") or []:
            print(f"Not found on Scryfall: {missing.get('name')}")

        print(f"Fetched batch {idx}: {len(data.get('data') or [])} cards")
        cards.extend(data.get("data") or [])

        # Scryfall asks for 50-100ms between requests
        time.sleep(0.1)

    return cards


# ------------------ Normalization helpers ------------------ #

def front_face(card: Dict) -> Dict:
    """Modal/double-faced cards keep cost and type on their first face."""
    faces = card.get("card_faces") or []
    if not card.get("mana_cost") and faces:
        return faces[0]
    return card


def normalize_produced_mana(value) -> List[str]:
    """Keep WUBRG/C symbols only, colors first in WUBRG order."""
    symbols = {str(v).strip().upper() for v in (value or [])}
    ordered = [c for c in COLORED if c in symbols]
    if "C" in symbols:
        ordered.append("C")
    return ordered


def role_tags(name: str, roles: RoleTable) -> List[str]:
    return sorted(role.value for role in roles.roles(name))


# ------------------ CSV writing ------------------ #

def write_csv_from_scryfall_cards(
    cards: Iterable[Dict],
    csv_path: Path,
    roles: RoleTable = DEFAULT_ROLE_TABLE,
) -> int:
    """
    Convert Scryfall card objects into our CSV schema.
    Returns number of cards written.
    """
    csv_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()

        for c in cards:
            name = (c.get("name") or "").strip()
            if not name:
                continue

            face = front_face(c)
            type_line = (face.get("type_line") or c.get("type_line") or "").strip()
            produced = normalize_produced_mana(c.get("produced_mana"))

            writer.writerow(
                {
                    "name": name,
                    "mana_cost": (face.get("mana_cost") or "").strip(),
                    "type_line": type_line,
                    "produced_mana": ", ".join(produced),
                    "tags": ", ".join(role_tags(name, roles)),
                    "oracle_text": (face.get("oracle_text") or "").strip(),
                    "set_name": (c.get("set_name") or "").strip(),
                }
            )
            count += 1

    return count


def main() -> None:
    names = deck_card_names(DECK_PATH)
    print(f"Fetching {len(names)} cards from Scryfall: {COLLECTION_URL}")
    cards = fetch_cards(names)

    written = write_csv_from_scryfall_cards(cards, CSV_PATH)
    print(f"Wrote {written} cards to {CSV_PATH}")


if __name__ == "__main__":
    main()
