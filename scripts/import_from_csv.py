# scripts/import_from_csv.py

import csv
from pathlib import Path

import card_db
from card_db import CardRecord, upsert_card, init_db
from cost_parser import Color


CSV_PATH = Path("data/cards.csv")


def parse_tags(raw: str) -> list[str]:
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def parse_colors(raw: str) -> list[Color]:
    """'U, B' -> [Color.BLUE, Color.BLACK]. Raises ValueError on an unknown symbol."""
    return [Color(symbol.upper()) for symbol in parse_tags(raw)]


def import_cards_from_csv(csv_path: Path) -> int:
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    init_db()

    imported_count = 0

    with csv_path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)

        for line_num, row in enumerate(reader, start=2):  # start=2 (line after header)
            # Skip completely empty rows
            if not row or all(v in (None, "", " ") for v in row.values()):
                print(f"Skipping empty row at line {line_num}")
                continue

            name = (row.get("name") or "").strip()
            if not name:
                print(f"Skipping row {line_num}: missing name -> {row}")
                continue

            type_line = (row.get("type_line") or "").strip()
            if not type_line:
                print(f"Skipping row {line_num}: missing type_line for '{name}'")
                continue

            try:
                produced_mana = parse_colors(row.get("produced_mana") or "")
            except ValueError as e:
                print(f"Skipping row {line_num}: invalid produced_mana '{row.get('produced_mana')}' -> {e}")
                continue

            record = CardRecord(
                name=name,
                mana_cost=(row.get("mana_cost") or "").strip(),
                type_line=type_line,
                produced_mana=produced_mana,
                tags=parse_tags(row.get("tags") or ""),
                oracle_text=(row.get("oracle_text") or "").strip() or None,
                set_name=(row.get("set_name") or "").strip() or None,
            )

            upsert_card(record)
            imported_count += 1

    return imported_count


def main() -> None:
    count = import_cards_from_csv(CSV_PATH)
    print(f"Imported/updated {count} cards from {CSV_PATH} into db {card_db.DB_PATH.resolve()}")


if __name__ == "__main__":
    main()
