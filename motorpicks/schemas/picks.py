from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class GameMode(str, Enum):
    FULL_THROTTLE = "Full Throttle"   # all-or-nothing
    SAFETY_CAR = "Safety Car"         # tiered partial credit

class SessionType(str, Enum):
    QUALY = "qualy"
    RACE = "race"

class Direction(str, Enum):
    BETTER = "mejor"   # finish ahead of the line
    WORSE = "peor"     # finish behind the line

class PickOutcome(str, Enum):
    WON = "won"
    PARTIAL = "partial"
    LOST = "lost"

class Selection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    driver: str
    team: Optional[str] = None
    line: float
    better_or_worse: Optional[Direction] = Field(default=None, alias="betterOrWorse")
    gp_name: Optional[str] = None
    session_type: SessionType = SessionType.RACE

class PickCreate(BaseModel):
    gp_name: str
    mode: GameMode = GameMode.FULL_THROTTLE
    wager_amount: Decimal
    picks: List[Selection]
    full_name: Optional[str] = None

class PickOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    gp_name: str
    session_type: Optional[str] = None
    mode: str
    multiplier: int
    wager_amount: Decimal
    potential_win: Decimal
    created_at: Optional[datetime] = None

class PickResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pick_id: int
    gp_name: str
    mode: str
    correct_count: int
    total_picks: int
    result: PickOutcome
    payout: Decimal
    processed_at: datetime

class SettlementSummary(BaseModel):
    pick_id: int
    result: PickOutcome
    payout: Decimal

class ProcessPicksResponse(BaseModel):
    message: str
    results: List[SettlementSummary]
