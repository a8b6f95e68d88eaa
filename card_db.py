# card_db.py - simple SQLite card catalog helper

import json
import sqlite3
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel

from cost_parser import Color, mana_value
from game_state import Card

DB_PATH = Path("cards.db")


class CardRecord(BaseModel):
    name: str
    mana_cost: str = ""
    type_line: str = ""
    produced_mana: List[Color] = []
    tags: List[str] = []
    oracle_text: Optional[str] = None
    set_name: Optional[str] = None

    @property
    def mana_value(self) -> int:
        return mana_value(self.mana_cost)

    def to_card(self) -> Card:
        return Card(
            name=self.name,
            mana_cost=self.mana_cost,
            type_line=self.type_line,
            produced_mana=tuple(self.produced_mana),
        )


def set_db_path(path: Path) -> None:
    """Point the catalog at another sqlite file (settings, tests)."""
    global DB_PATH
    DB_PATH = Path(path)


def get_connection() -> sqlite3.Connection:
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    """Create the cards table if it doesn't exist."""
    conn = get_connection()
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS cards (
                name          TEXT PRIMARY KEY,
                mana_cost     TEXT NOT NULL DEFAULT '',
                type_line     TEXT NOT NULL DEFAULT '',
                mana_value    INTEGER NOT NULL DEFAULT 0,
                produced_mana TEXT,          -- JSON array
                tags          TEXT,          -- JSON array
                oracle_text   TEXT,
                set_name      TEXT
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


def upsert_card(card: CardRecord) -> None:
    """Insert or update a card in the catalog."""
    conn = get_connection()
    try:
        conn.execute(
            """
            INSERT INTO cards (
                name,
                mana_cost,
                type_line,
                mana_value,
                produced_mana,
                tags,
                oracle_text,
                set_name
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET
                mana_cost     = excluded.mana_cost,
                type_line     = excluded.type_line,
                mana_value    = excluded.mana_value,
                produced_mana = excluded.produced_mana,
                tags          = excluded.tags,
                oracle_text   = excluded.oracle_text,
                set_name      = excluded.set_name;
            """,
            (
                card.name,
                card.mana_cost,
                card.type_line,
                card.mana_value,
                json.dumps([c.value for c in card.produced_mana]),
                json.dumps(card.tags),
                card.oracle_text,
                card.set_name,
            ),
        )
        conn.commit()
    finally:
        conn.close()


def row_to_card(row: sqlite3.Row) -> CardRecord:
    return CardRecord(
        name=row["name"],
        mana_cost=row["mana_cost"] or "",
        type_line=row["type_line"] or "",
        produced_mana=json.loads(row["produced_mana"]) if row["produced_mana"] else [],
        tags=json.loads(row["tags"]) if row["tags"] else [],
        oracle_text=row["oracle_text"],
        set_name=row["set_name"],
    )


def get_card(name: str) -> Optional[CardRecord]:
    conn = get_connection()
    try:
        cur = conn.execute("SELECT * FROM cards WHERE name = ?;", (name,))
        row = cur.fetchone()
        if row is None:
            return None
        return row_to_card(row)
    finally:
        conn.close()


def list_cards(
    type_contains: Optional[str] = None,
    tag: Optional[str] = None,
    max_mana_value: Optional[int] = None,
) -> List[CardRecord]:
    conn = get_connection()
    try:
        query = "SELECT * FROM cards WHERE 1=1"
        params: list = []

        if type_contains is not None:
            query += " AND lower(type_line) LIKE ?"
            params.append(f"%{type_contains.lower()}%")

        if max_mana_value is not None:
            query += " AND mana_value <= ?"
            params.append(max_mana_value)

        cur = conn.execute(query + " ORDER BY mana_value, name;", params)
        cards = [row_to_card(r) for r in cur.fetchall()]
    finally:
        conn.close()

    # Tags are stored as JSON, so filter them here.
    if tag is not None:
        cards = [c for c in cards if tag in c.tags]
    return cards


def count_cards() -> int:
    conn = get_connection()
    try:
        cur = conn.execute("SELECT COUNT(*) AS c FROM cards;")
        row = cur.fetchone()
        return row["c"]
    finally:
        conn.close()


def catalog_tags() -> Dict[str, List[str]]:
    """Card name -> tags, for extending the role table from the catalog."""
    return {c.name: c.tags for c in list_cards() if c.tags}
