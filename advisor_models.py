# Advisor request/response models
# advisor_models.py

from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from cost_parser import Color
from game_state import Card

OPENING_HAND_SIZE = 7


class Decision(str, Enum):
    KEEP = "KEEP"
    MULLIGAN = "MULLIGAN"


class HandStats(BaseModel):
    lands: int = 0
    interaction: int = 0
    selection: int = 0
    payoff: int = 0
    fast_mana: int = 0
    tier: int = Field(0, ge=0, le=3)


class MulliganAdvice(BaseModel):
    decision: Decision
    reasons: List[str]
    line: List[str] = Field(description="Best turn-one line found, first entries of the trace")
    stats: HandStats
    score: int = 0
    fired: List[str] = Field(default_factory=list, description="Keys of the detectors that fired")


class MulliganRequest(BaseModel):
    """Request for mulligan advice on a seven-card opener."""
    hand: List[str] = Field(
        ...,
        description="Card names in the opening hand",
        min_length=OPENING_HAND_SIZE,
        max_length=OPENING_HAND_SIZE,
    )
    main: Optional[List[str]] = Field(None, description="Override the loaded deck's mainboard names")
    side: Optional[List[str]] = Field(None, description="Override the loaded deck's sideboard names")

    @field_validator('hand')
    @classmethod
    def validate_hand_size(cls, v):
        if len(v) != OPENING_HAND_SIZE:
            raise ValueError('Opening hand must contain exactly 7 cards')
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "hand": [
                    "Black Lotus", "Mox Jet", "Swamp", "Island",
                    "Demonic Tutor", "Time Vault", "Force of Will"
                ]
            }
        }


class SampleHandRequest(BaseModel):
    seed: Optional[int] = Field(None, description="Seed for a reproducible shuffle")


class SampleHandResponse(BaseModel):
    hand: List[Card]
    advice: MulliganAdvice


class CardUpsertRequest(BaseModel):
    name: str
    mana_cost: str = Field("", description="Brace notation or shorthand such as '1U'")
    type_line: str = ""
    produced_mana: List[Color] = []
    tags: List[str] = []
