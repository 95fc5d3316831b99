"""
Trial balance, profit & loss and balance sheet.

Each function takes any iterable of rows exposing account_code,
account_name, debit_amount and credit_amount (JournalEntry instances,
JournalDraft objects, ...) already filtered to one company and period.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from ..taxonomy import AccountClass, classify

ZERO = Decimal("0.00")
# absolute tolerance for "balanced"
TOLERANCE = Decimal("0.01")


@dataclass
class AccountTotals:
    account_code: str
    account_name: str
    total_debits: Decimal = ZERO
    total_credits: Decimal = ZERO

    @property
    def net_balance(self):
        return self.total_debits - self.total_credits

    @property
    def account_class(self):
        return classify(self.account_code)


def group_by_account(entries):
    """Per-code debit/credit totals, in first-seen order. Name comes from the first row."""
    groups = {}
    for entry in entries:
        code = str(entry.account_code)
        totals = groups.get(code)
        if totals is None:
            totals = groups[code] = AccountTotals(code, entry.account_name)
        totals.total_debits += Decimal(entry.debit_amount or 0)
        totals.total_credits += Decimal(entry.credit_amount or 0)
    return list(groups.values())


def _is_balanced(left, right):
    return abs(left - right) < TOLERANCE


# ---------- Trial balance ----------
@dataclass
class TrialBalanceRow:
    account_code: str
    account_name: str
    debit_balance: Decimal
    credit_balance: Decimal

    def to_dict(self):
        return {
            "accountCode": self.account_code,
            "accountName": self.account_name,
            "debitBalance": self.debit_balance,
            "creditBalance": self.credit_balance,
        }


@dataclass
class TrialBalance:
    entries: List[TrialBalanceRow] = field(default_factory=list)
    total_debits: Decimal = ZERO
    total_credits: Decimal = ZERO

    @property
    def is_balanced(self):
        return _is_balanced(self.total_debits, self.total_credits)

    def to_dict(self):
        return {
            "entries": [row.to_dict() for row in self.entries],
            "totalDebits": self.total_debits,
            "totalCredits": self.total_credits,
            "isBalanced": self.is_balanced,
        }


def trial_balance(entries) -> TrialBalance:
    """
    One row per account code with debit and credit totals kept apart.
    Codes outside the known classes still appear here, so the totals
    always equal the sums of the input rows.
    """
    result = TrialBalance()
    for totals in group_by_account(entries):
        result.entries.append(
            TrialBalanceRow(
                totals.account_code,
                totals.account_name,
                totals.total_debits,
                totals.total_credits,
            )
        )
        result.total_debits += totals.total_debits
        result.total_credits += totals.total_credits
    return result


# ---------- Profit & Loss ----------
@dataclass
class StatementLine:
    account_code: str
    account_name: str
    amount: Decimal
    line_type: str

    def to_dict(self):
        return {
            "accountCode": self.account_code,
            "accountName": self.account_name,
            "amount": self.amount,
            "type": self.line_type,
        }


def _sorted(lines):
    return sorted(lines, key=lambda line: line.account_code)


@dataclass
class ProfitAndLoss:
    revenue: List[StatementLine] = field(default_factory=list)
    expenses: List[StatementLine] = field(default_factory=list)
    total_revenue: Decimal = ZERO
    total_expenses: Decimal = ZERO

    @property
    def net_profit(self):
        return self.total_revenue - self.total_expenses

    def to_dict(self):
        return {
            "revenue": [line.to_dict() for line in self.revenue],
            "expenses": [line.to_dict() for line in self.expenses],
            "totalRevenue": self.total_revenue,
            "totalExpenses": self.total_expenses,
            "netProfit": self.net_profit,
        }


def profit_and_loss(entries) -> ProfitAndLoss:
    """
    Revenue lines report the credit total of each 4xxx code.
    Expense codes (5xxx) with a debit net balance are normal lines; a credit
    net balance is shown as an "expense_credit" line and its size is taken
    off total expenses.
    """
    result = ProfitAndLoss()
    for totals in group_by_account(entries):
        account_class = totals.account_class
        if account_class is AccountClass.REVENUE:
            if totals.total_credits > 0:
                result.revenue.append(
                    StatementLine(totals.account_code, totals.account_name,
                                  totals.total_credits, "revenue")
                )
                result.total_revenue += totals.total_credits
        elif account_class is AccountClass.EXPENSE:
            net = totals.net_balance
            if net > 0:
                result.expenses.append(
                    StatementLine(totals.account_code, totals.account_name, net, "expense")
                )
                result.total_expenses += net
            elif net < 0:
                result.expenses.append(
                    StatementLine(totals.account_code, f"{totals.account_name} (Credit)",
                                  abs(net), "expense_credit")
                )
                result.total_expenses -= abs(net)
    result.revenue = _sorted(result.revenue)
    result.expenses = _sorted(result.expenses)
    return result


# ---------- Balance sheet ----------
@dataclass
class BalanceSheet:
    assets: List[StatementLine] = field(default_factory=list)
    liabilities: List[StatementLine] = field(default_factory=list)
    equity: List[StatementLine] = field(default_factory=list)
    total_assets: Decimal = ZERO
    total_liabilities: Decimal = ZERO
    total_equity: Decimal = ZERO

    @property
    def is_balanced(self):
        return _is_balanced(self.total_assets, self.total_liabilities + self.total_equity)

    def to_dict(self):
        return {
            "assets": [line.to_dict() for line in self.assets],
            "liabilities": [line.to_dict() for line in self.liabilities],
            "equity": [line.to_dict() for line in self.equity],
            "totalAssets": self.total_assets,
            "totalLiabilities": self.total_liabilities,
            "totalEquity": self.total_equity,
            "isBalanced": self.is_balanced,
        }


def balance_sheet(entries) -> BalanceSheet:
    """Assets with a net debit balance, liabilities and equity with a net credit balance."""
    result = BalanceSheet()
    for totals in group_by_account(entries):
        account_class = totals.account_class
        net = totals.net_balance
        if account_class is AccountClass.ASSET and net > 0:
            result.assets.append(
                StatementLine(totals.account_code, totals.account_name, net, "asset")
            )
            result.total_assets += net
        elif account_class is AccountClass.LIABILITY and -net > 0:
            result.liabilities.append(
                StatementLine(totals.account_code, totals.account_name, -net, "liability")
            )
            result.total_liabilities += -net
        elif account_class is AccountClass.EQUITY and -net > 0:
            result.equity.append(
                StatementLine(totals.account_code, totals.account_name, -net, "equity")
            )
            result.total_equity += -net
        # revenue, expense and unknown codes never reach the balance sheet
    result.assets = _sorted(result.assets)
    result.liabilities = _sorted(result.liabilities)
    result.equity = _sorted(result.equity)
    return result
