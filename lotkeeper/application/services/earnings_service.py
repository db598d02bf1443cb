from decimal import Decimal

from lotkeeper.domain.ledger import LedgerEngine
from lotkeeper.schemas.snapshots import EarningsSnapshot


class EarningsService:
    def __init__(self, ledger_engine: LedgerEngine, currency_symbol: str = "P"):
        self.ledger_engine = ledger_engine
        self.currency_symbol = currency_symbol

    def get_total_earnings(self) -> Decimal:
        return self.ledger_engine.ledger.total_earnings

    def get_weekly_earnings(self) -> Decimal:
        return self.ledger_engine.ledger.weekly_earnings

    def get_monthly_earnings(self) -> Decimal:
        return self.ledger_engine.ledger.monthly_earnings

    def get_snapshot(self) -> EarningsSnapshot:
        total, weekly, monthly = self.ledger_engine.snapshot()
        return EarningsSnapshot(total=total, weekly=weekly, monthly=monthly, currency_symbol=self.currency_symbol)
