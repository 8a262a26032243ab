"""Wallet balances, promo code redemption and withdrawal requests.

Balance changes and their ledger rows (``transactions``) are written in the
same database transaction, so the wallet and the ledger never disagree.
"""
from __future__ import annotations
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import logging
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from motorpicks.core.config import settings
from motorpicks.core.errors import (
    InsufficientFunds,
    InvalidPromoCode,
    InvalidWithdrawal,
    PromoCodeAlreadyRedeemed,
    PromoCodeExhausted,
    PromoCodeExpired,
    PromoCodeNotFound,
)
from motorpicks.models.picks import (
    PromoCode,
    PromoCodeRedemption,
    Transaction,
    Wallet,
    WithdrawalRequest,
)

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS = 30


def get_wallet(db: Session, user_id: str) -> Wallet:
    wallet = db.get(Wallet, user_id)
    if wallet is None:
        wallet = Wallet(user_id=user_id, balance_cop=Decimal("0"), withdrawable_cop=Decimal("0"),
                        mmc_coins=0, fuel_coins=0)
        db.add(wallet)
        db.flush()
    return wallet

def wallet_summary(db: Session, user_id: str) -> dict:
    wallet = get_wallet(db, user_id)
    txs = db.scalars(
        select(Transaction)
        .where(Transaction.user_id == user_id)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .limit(RECENT_TRANSACTIONS)
    ).all()
    db.commit()
    return {"wallet": wallet, "transactions": txs}

def debit_balance(db: Session, user_id: str, amount: Decimal, tx_type: str, description: str) -> Wallet:
    """Take ``amount`` from the COP balance; caller commits."""
    wallet = get_wallet(db, user_id)
    if Decimal(wallet.balance_cop) < amount:
        raise InsufficientFunds(f"Saldo insuficiente: {wallet.balance_cop} < {amount}")
    wallet.balance_cop = Decimal(wallet.balance_cop) - amount
    # withdrawable funds are spent first
    wallet.withdrawable_cop = max(Decimal("0"), Decimal(wallet.withdrawable_cop) - amount)
    db.add(Transaction(user_id=user_id, type=tx_type, amount=-amount, description=description))
    return wallet

def _normalise_code(code: Optional[str]) -> str:
    return str(code or "").strip().upper()

def redeem_promo_code(db: Session, user_id: str, code: str) -> PromoCode:
    normalised = _normalise_code(code)
    if not normalised:
        raise InvalidPromoCode("Cuerpo inválido")

    promo = db.scalars(select(PromoCode).where(PromoCode.code == normalised)).first()
    if promo is None:
        raise PromoCodeNotFound("Código inválido")

    if promo.expires_at is not None:
        expires_at = promo.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at < datetime.now(timezone.utc):
            raise PromoCodeExpired("Código expirado")

    uses = db.scalar(
        select(func.count(PromoCodeRedemption.id)).where(PromoCodeRedemption.code_id == promo.id)
    )
    if uses >= promo.max_uses:
        raise PromoCodeExhausted("Código agotado")

    already = db.scalars(
        select(PromoCodeRedemption.id)
        .where(PromoCodeRedemption.code_id == promo.id, PromoCodeRedemption.user_id == user_id)
    ).first()
    if already is not None:
        raise PromoCodeAlreadyRedeemed("Ya canjeaste este código")

    try:
        with db.begin_nested():
            db.add(PromoCodeRedemption(code_id=promo.id, user_id=user_id))
    except IntegrityError:
        # lost the race against a concurrent redemption by the same user
        db.rollback()
        raise PromoCodeAlreadyRedeemed("Ya canjeaste este código")

    wallet = get_wallet(db, user_id)
    wallet.mmc_coins += promo.mmc_amount
    wallet.fuel_coins += promo.fuel_amount
    db.add(Transaction(
        user_id=user_id,
        type="promo",
        amount=Decimal(promo.fuel_amount),
        description=f"Código {normalised}: +{promo.fuel_amount} Fuel, +{promo.mmc_amount} MMC",
    ))
    db.commit()
    logger.info("User %s redeemed promo code %s", user_id, normalised)
    return promo

def request_withdrawal(db: Session, user_id: str, amount: Decimal, method: str, account: str) -> WithdrawalRequest:
    amount = Decimal(str(amount))
    if amount < settings.min_withdraw_cop:
        raise InvalidWithdrawal(f"Monto mínimo {settings.min_withdraw_cop}")
    if not method or not account:
        raise InvalidWithdrawal("Método y cuenta requeridos")

    wallet = get_wallet(db, user_id)
    if Decimal(wallet.withdrawable_cop) < amount:
        raise InsufficientFunds("Saldo retirable insuficiente")
    wallet.withdrawable_cop = Decimal(wallet.withdrawable_cop) - amount
    wallet.balance_cop = max(Decimal("0"), Decimal(wallet.balance_cop) - amount)

    req = WithdrawalRequest(user_id=user_id, amount=amount, method=method, account=account, status="pending")
    db.add(req)
    db.flush()
    db.add(Transaction(
        user_id=user_id,
        type="retiro_pending",
        amount=-amount,
        description=f"Retiro solicitado (#{req.id})",
    ))
    db.commit()
    logger.info("Withdrawal #%s requested by %s for %s COP", req.id, user_id, amount)
    return req
