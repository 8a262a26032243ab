from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

class WalletOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    balance_cop: Decimal
    withdrawable_cop: Decimal
    mmc_coins: int
    fuel_coins: int

class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    amount: Decimal
    description: Optional[str] = None
    created_at: Optional[datetime] = None

class WalletSummary(BaseModel):
    wallet: WalletOut
    transactions: List[TransactionOut]

class RedeemRequest(BaseModel):
    code: str = ""

class RedeemResponse(BaseModel):
    message: str
    fuel_amount: int
    mmc_amount: int

class WithdrawRequest(BaseModel):
    amount: Decimal
    method: str = ""
    account: str = ""

class WithdrawResponse(BaseModel):
    ok: bool
    request_id: int
