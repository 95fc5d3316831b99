from enum import Enum
from typing import NamedTuple, Optional


# ---------- Account classes ----------
class AccountClass(str, Enum):
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def normal_balance(self):
        # assets and expenses grow on the debit side
        if self in (AccountClass.ASSET, AccountClass.EXPENSE):
            return "debit"
        return "credit"


# First digit of a 4-digit account code decides its class.
# Every statement reads this table, nothing else checks prefixes.
CODE_PREFIX_CLASSES = {
    "1": AccountClass.ASSET,
    "2": AccountClass.LIABILITY,
    "3": AccountClass.EQUITY,
    "4": AccountClass.REVENUE,
    "5": AccountClass.EXPENSE,
}


def classify(code) -> Optional[AccountClass]:
    """Return the AccountClass for an account code, or None when the prefix is unknown."""
    if not code:
        return None
    return CODE_PREFIX_CLASSES.get(str(code).strip()[:1])


# ---------- Chart of accounts used by the generator ----------
class ChartAccount(NamedTuple):
    code: str
    name: str


BANK_ACCOUNT = ChartAccount("1000", "Bank Account")
ACCOUNTS_RECEIVABLE = ChartAccount("1200", "Accounts Receivable")
INVENTORY_PURCHASES = ChartAccount("1300", "Inventory/Purchases")
ACCOUNTS_PAYABLE = ChartAccount("2100", "Accounts Payable")
SALES_REVENUE = ChartAccount("4100", "Sales Revenue")
OTHER_INCOME = ChartAccount("4200", "Other Income")
VENDOR_EXPENSES = ChartAccount("5100", "Vendor Expenses")
BANK_CHARGES = ChartAccount("5200", "Bank Charges/Expenses")
