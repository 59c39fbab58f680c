"""Wallet 테스트"""

import pytest

from src.core.wallet import INITIAL_MONEY, Wallet


class TestWallet:
    def test_initial_money(self) -> None:
        assert Wallet().money == INITIAL_MONEY

    def test_earn(self) -> None:
        wallet = Wallet(0)
        assert wallet.earn(75) == 75

    def test_spend_insufficient_keeps_balance(self) -> None:
        wallet = Wallet(10)
        assert not wallet.spend(11)
        assert wallet.money == 10

    def test_spend(self) -> None:
        wallet = Wallet(10)
        assert wallet.spend(10)
        assert wallet.money == 0

    def test_negative_amount_raises(self) -> None:
        with pytest.raises(ValueError):
            Wallet().earn(-1)
        with pytest.raises(ValueError):
            Wallet().spend(-1)
