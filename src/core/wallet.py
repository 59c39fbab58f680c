"""재화(골드) 보관"""

import logging

logger = logging.getLogger(__name__)

INITIAL_MONEY = 100


class Wallet:
    def __init__(self, money: int = INITIAL_MONEY) -> None:
        self.money = money

    def earn(self, amount: int) -> int:
        if amount < 0:
            raise ValueError(f"Cannot earn negative amount: {amount}")
        self.money += amount
        logger.debug("Earned %d, balance %d", amount, self.money)
        return self.money

    def spend(self, amount: int) -> bool:
        """잔액 부족이면 False (변경 없음)."""
        if amount < 0:
            raise ValueError(f"Cannot spend negative amount: {amount}")
        if self.money < amount:
            logger.info("Insufficient money: %d < %d", self.money, amount)
            return False
        self.money -= amount
        logger.debug("Spent %d, balance %d", amount, self.money)
        return True
