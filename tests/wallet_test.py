from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from motorpicks.core.errors import (
    InsufficientFunds,
    InvalidPromoCode,
    InvalidWithdrawal,
    PromoCodeAlreadyRedeemed,
    PromoCodeExhausted,
    PromoCodeExpired,
    PromoCodeNotFound,
)
from motorpicks.models.picks import PromoCode, PromoCodeRedemption, Transaction, Wallet, WithdrawalRequest
from motorpicks.services import wallet as wallet_service

USER = {"X-User-Id": "user_1"}


@pytest.fixture
def promo(db):
    def _promo(code="POLE2025", fuel=5000, mmc=5, max_uses=10, expires_at=None):
        row = PromoCode(code=code, fuel_amount=fuel, mmc_amount=mmc, max_uses=max_uses, expires_at=expires_at)
        db.add(row)
        db.commit()
        return row
    return _promo


def test_wallet_is_created_on_first_access(db):
    wallet = wallet_service.get_wallet(db, "newcomer")
    assert wallet.balance_cop == 0
    assert wallet.mmc_coins == 0

def test_redeem_credits_coins_and_records_transaction(db, promo):
    promo()
    wallet_service.redeem_promo_code(db, "user_1", "  pole2025 ")

    wallet = db.get(Wallet, "user_1")
    assert (wallet.fuel_coins, wallet.mmc_coins) == (5000, 5)
    tx = db.scalars(select(Transaction).where(Transaction.user_id == "user_1")).one()
    assert tx.type == "promo"

def test_redeem_twice_rejected(db, promo):
    promo()
    wallet_service.redeem_promo_code(db, "user_1", "POLE2025")
    with pytest.raises(PromoCodeAlreadyRedeemed):
        wallet_service.redeem_promo_code(db, "user_1", "POLE2025")
    assert db.get(Wallet, "user_1").fuel_coins == 5000

def test_redeem_unknown_empty_expired_exhausted(db, promo):
    promo(code="OLD", expires_at=datetime.now(timezone.utc) - timedelta(days=1))
    promo(code="ONCE", max_uses=1)
    wallet_service.redeem_promo_code(db, "user_2", "ONCE")

    with pytest.raises(InvalidPromoCode):
        wallet_service.redeem_promo_code(db, "user_1", "   ")
    with pytest.raises(PromoCodeNotFound):
        wallet_service.redeem_promo_code(db, "user_1", "NOPE")
    with pytest.raises(PromoCodeExpired):
        wallet_service.redeem_promo_code(db, "user_1", "OLD")
    with pytest.raises(PromoCodeExhausted):
        wallet_service.redeem_promo_code(db, "user_1", "ONCE")

def test_redeem_race_maps_to_already_redeemed(db, promo, monkeypatch):
    code = promo()
    db.add(PromoCodeRedemption(code_id=code.id, user_id="user_1"))
    db.commit()

    # the per-user lookup ran before the concurrent insert landed
    real_scalars = db.scalars
    calls = {"n": 0}

    def scalars(stmt, *a, **kw):
        result = real_scalars(stmt, *a, **kw)
        if "promo_code_redemptions" in str(stmt) and "user_id" in str(stmt):
            calls["n"] += 1
            return real_scalars(select(PromoCodeRedemption.id).where(PromoCodeRedemption.id == -1))
        return result

    monkeypatch.setattr(db, "scalars", scalars)
    with pytest.raises(PromoCodeAlreadyRedeemed):
        wallet_service.redeem_promo_code(db, "user_1", "POLE2025")
    assert calls["n"] == 1
    monkeypatch.undo()
    assert len(db.scalars(select(PromoCodeRedemption)).all()) == 1

def test_withdrawal_moves_funds_to_pending_request(db, add_user):
    add_user(balance=60_000, withdrawable=30_000)

    req = wallet_service.request_withdrawal(db, "user_1", Decimal("20000"), "nequi", "3001234567")

    wallet = db.get(Wallet, "user_1")
    assert wallet.withdrawable_cop == Decimal("10000")
    assert wallet.balance_cop == Decimal("40000")
    assert req.status == "pending"
    tx = db.scalars(select(Transaction).where(Transaction.type == "retiro_pending")).one()
    assert tx.amount == -20_000
    assert f"#{req.id}" in tx.description

def test_ledger_amounts_keep_cents(db, add_user):
    add_user(balance=60_000, withdrawable=30_000)

    wallet_service.request_withdrawal(db, "user_1", Decimal("12345.67"), "nequi", "3001234567")

    tx = db.scalars(select(Transaction).where(Transaction.type == "retiro_pending")).one()
    assert tx.amount == Decimal("-12345.67")
    assert db.get(Wallet, "user_1").withdrawable_cop == Decimal("17654.33")

@pytest.mark.parametrize("amount, method, account, exc", [
    (9_999, "nequi", "300", InvalidWithdrawal),
    (10_000, "", "300", InvalidWithdrawal),
    (10_000, "nequi", "", InvalidWithdrawal),
    (40_000, "nequi", "300", InsufficientFunds),
])
def test_withdrawal_rejections(db, add_user, amount, method, account, exc):
    add_user(balance=60_000, withdrawable=30_000)
    with pytest.raises(exc):
        wallet_service.request_withdrawal(db, "user_1", Decimal(amount), method, account)
    db.rollback()
    assert db.scalars(select(WithdrawalRequest)).all() == []
    assert db.get(Wallet, "user_1").withdrawable_cop == Decimal("30000")

def test_wallet_routes(client, add_user, promo):
    add_user(balance=30_000, withdrawable=30_000)
    promo()

    r = client.post("/promocodes/redeem", json={"code": "pole2025"}, headers=USER)
    assert r.status_code == 200
    assert r.json()["fuel_amount"] == 5000

    r = client.post("/promocodes/redeem", json={"code": "pole2025"}, headers=USER)
    assert r.status_code == 400
    assert r.json()["detail"] == "Ya canjeaste este código"

    r = client.post("/promocodes/redeem", json={"code": "missing"}, headers=USER)
    assert r.status_code == 404

    r = client.post("/withdraw", json={"amount": 15_000, "method": "nequi", "account": "300"}, headers=USER)
    assert r.status_code == 200
    assert r.json()["ok"] is True

    r = client.get("/wallet", headers=USER)
    assert r.status_code == 200
    body = r.json()
    assert body["wallet"]["fuel_coins"] == 5000
    assert Decimal(body["wallet"]["withdrawable_cop"]) == Decimal("15000")
    assert {t["type"] for t in body["transactions"]} == {"promo", "retiro_pending"}

def test_wallet_routes_require_user(client):
    assert client.get("/wallet").status_code == 401
    assert client.post("/promocodes/redeem", json={"code": "X"}).status_code == 401
