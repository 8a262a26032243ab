from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from motorpicks.api.deps import current_user_id
from motorpicks.db.session import get_db
from motorpicks.schemas.wallet import (
    RedeemRequest, RedeemResponse, WalletSummary, WithdrawRequest, WithdrawResponse,
)
from motorpicks.services import wallet as wallet_service

router = APIRouter()

@router.get("/wallet", response_model=WalletSummary)
def wallet(user_id: str = Depends(current_user_id), db: Session = Depends(get_db)):
    return wallet_service.wallet_summary(db, user_id)

@router.post("/promocodes/redeem", response_model=RedeemResponse)
def redeem(body: RedeemRequest, user_id: str = Depends(current_user_id), db: Session = Depends(get_db)):
    promo = wallet_service.redeem_promo_code(db, user_id, body.code)
    return {
        "message": f"¡Código aplicado! +{promo.fuel_amount} Fuel y +{promo.mmc_amount} MMC",
        "fuel_amount": promo.fuel_amount,
        "mmc_amount": promo.mmc_amount,
    }

@router.post("/withdraw", response_model=WithdrawResponse)
def withdraw(body: WithdrawRequest, user_id: str = Depends(current_user_id), db: Session = Depends(get_db)):
    req = wallet_service.request_withdrawal(db, user_id, body.amount, body.method, body.account)
    return {"ok": True, "request_id": req.id}
