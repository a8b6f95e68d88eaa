# api.py

import logging
import random
from fastapi import FastAPI, Query, HTTPException
from fastapi.responses import PlainTextResponse
from typing import List, Optional
from advisor import UnknownCardError, get_mulligan_advice, resolve_hand
from advisor_models import (
    CardUpsertRequest,
    MulliganAdvice,
    MulliganRequest,
    SampleHandRequest,
    SampleHandResponse,
)
from card_db import (
    CardRecord,
    catalog_tags,
    count_cards,
    get_card,
    init_db,
    list_cards,
    set_db_path,
    upsert_card,
)
from card_roles import DEFAULT_ROLE_TABLE, RoleTable
from cost_parser import normalize_mana_input
from deck_index import (
    OPENING_HAND_SIZE,
    Deck,
    DeckColumn,
    DeckIndex,
    DeckLoadError,
    DeckSummary,
    build_deck_index,
    deck_summary,
    draw_sample_hand,
    format_deck_as_text,
    load_deck,
    mana_value_columns,
)
from logger_config import setup_logging
from settings import AdvisorSettings, load_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Vintage Mulligan Assistant")


class AppState:
    settings: AdvisorSettings = AdvisorSettings()
    deck: Deck = Deck()
    deck_index: DeckIndex = DeckIndex()


state = AppState()


@app.on_event("startup")
def on_startup() -> None:
    state.settings = load_settings()
    setup_logging(state.settings.log_level, state.settings.logs_dir)
    set_db_path(state.settings.db_path)
    init_db()

    try:
        state.deck = load_deck(state.settings.deck_path)
    except DeckLoadError as e:
        logger.error(f"Could not load deck, starting with an empty one: {e}")
        state.deck = Deck()
    state.deck_index = build_deck_index(state.deck)


class CardResponse(CardRecord):
    pass


def _current_roles() -> RoleTable:
    """Default roles plus any role tags stored in the card catalog."""
    tagged = RoleTable.from_tag_lists(catalog_tags())
    return DEFAULT_ROLE_TABLE.merged({name: tagged.roles(name) for name in tagged.names()})


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "deck": state.deck.deck_name, "main_count": state.deck.main_count}


@app.post("/advice/mulligan", response_model=MulliganAdvice)
def mulligan_advice_endpoint(request: MulliganRequest) -> MulliganAdvice:
    """Provide keep/mulligan advice for a seven-card opener."""
    try:
        logger.info(f"Processing mulligan request for {len(request.hand)} cards")

        try:
            hand = resolve_hand(request.hand, state.deck_index)
        except UnknownCardError as e:
            logger.warning(f"Unknown cards in request: {e.names}")
            raise HTTPException(status_code=400, detail=str(e))

        deck_index = state.deck_index
        if request.main is not None or request.side is not None:
            deck_index = DeckIndex.from_names(request.main or [], request.side or [])

        advice = get_mulligan_advice(
            hand,
            deck_index,
            roles=_current_roles(),
            config=state.settings.search_config(),
        )

        logger.info(f"Mulligan advice generated: {advice.decision.value} (tier {advice.stats.tier})")
        return advice

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error processing mulligan advice: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@app.post("/advice/sample-hand", response_model=SampleHandResponse)
def sample_hand_endpoint(request: SampleHandRequest) -> SampleHandResponse:
    """Draw a random opener from the loaded deck and evaluate it."""
    try:
        if state.deck.main_count < OPENING_HAND_SIZE:
            raise HTTPException(
                status_code=400,
                detail=f"Deck has {state.deck.main_count} mainboard cards, need at least {OPENING_HAND_SIZE}",
            )

        hand = draw_sample_hand(state.deck, random.Random(request.seed))
        advice = get_mulligan_advice(
            hand,
            state.deck_index,
            roles=_current_roles(),
            config=state.settings.search_config(),
            source="sample_hand",
        )
        return SampleHandResponse(hand=hand, advice=advice)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error evaluating sample hand: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/deck", response_model=Deck)
def deck_endpoint() -> Deck:
    return state.deck


@app.get("/deck/export", response_class=PlainTextResponse)
def deck_export_endpoint() -> str:
    """Deck list as plain text, mainboard then sideboard."""
    return format_deck_as_text(state.deck)


@app.get("/deck/columns", response_model=List[DeckColumn])
def deck_columns_endpoint() -> List[DeckColumn]:
    return mana_value_columns(state.deck)


@app.get("/deck/summary", response_model=DeckSummary)
def deck_summary_endpoint() -> DeckSummary:
    """Mainboard counts by color identity and by card category."""
    return deck_summary(state.deck)


@app.get("/cards", response_model=List[CardResponse])
def list_cards_endpoint(
    type_contains: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    max_mana_value: Optional[int] = Query(None, ge=0),
) -> List[CardResponse]:
    """List cards in the catalog with optional filters."""
    return list_cards(type_contains=type_contains, tag=tag, max_mana_value=max_mana_value)


@app.get("/cards/count")
def card_count_endpoint() -> dict:
    """Returns the number of cards currently stored in cards.db."""
    total = count_cards()
    return {"card_count": total}


@app.get("/cards/{name}", response_model=CardResponse)
def get_card_endpoint(name: str) -> CardResponse:
    card = get_card(name)
    if card is None:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


@app.post("/cards", response_model=CardResponse)
def upsert_card_endpoint(payload: CardUpsertRequest) -> CardResponse:
    """Create or update a card manually. Costs may be typed as shorthand ("1U")."""
    data = payload.model_dump()
    data["mana_cost"] = normalize_mana_input(payload.mana_cost)
    record = CardRecord(**data)
    upsert_card(record)
    saved = get_card(record.name)
    assert saved is not None
    return saved
