"""
Pure ledger calculation engines.

Every engine here is a function of its arguments: no I/O, no database, no
configuration lookups and no clock.  Callers pass the records and the
``as_of_date``.

Engines:
    adjustment        Apply debit/credit notes to invoice totals
    payment_matching  Tie settlement payments to invoices
    settlement        Paid / remaining / status per invoice
    party_balance     Party balance, outstanding, advance, overdue
    ledger_report     Invoice history rows and transaction timeline
    summary           Full PartySummary for one party
    period_summary    Twelve-month breakdown of a timeline
    portfolio         Totals across party summaries
"""

from ledger_engines.adjustment import (
    InvoiceAdjustment,
    InvoiceAdjustmentResolver,
    note_matches_invoice,
)
from ledger_engines.ledger_report import (
    InvoiceHistoryRow,
    LedgerReportBuilder,
    OpeningPosition,
    PaymentDetailRow,
    TransactionKind,
    TransactionRow,
)
from ledger_engines.party_balance import (
    PartyBalance,
    PartyBalanceAggregator,
    is_invoice_overdue,
)
from ledger_engines.payment_matching import (
    InvoicePaymentMatch,
    MatchBasis,
    MatchedPayment,
    PaymentAttribution,
    PaymentMatcher,
    attribute_payments,
    match_payment_to_invoice,
    settlement_payments,
)
from ledger_engines.period_summary import MonthSummary, summarize_by_month
from ledger_engines.portfolio import PortfolioTotals, summarize_portfolio
from ledger_engines.settlement import (
    InvoiceSettlement,
    InvoiceSettlementCalculator,
    InvoiceSettlementStatus,
)
from ledger_engines.summary import PartySummary, build_party_summary
from ledger_engines.tracer import traced_engine
from ledger_kernel.logging_config import get_logger

get_logger("engines").debug("ledger_engines_package_loaded")

__all__ = [
    "InvoiceAdjustment",
    "InvoiceAdjustmentResolver",
    "InvoiceHistoryRow",
    "InvoicePaymentMatch",
    "InvoiceSettlement",
    "InvoiceSettlementCalculator",
    "InvoiceSettlementStatus",
    "LedgerReportBuilder",
    "MatchBasis",
    "MatchedPayment",
    "MonthSummary",
    "OpeningPosition",
    "PartyBalance",
    "PartyBalanceAggregator",
    "PartySummary",
    "PaymentAttribution",
    "PaymentDetailRow",
    "PaymentMatcher",
    "PortfolioTotals",
    "TransactionKind",
    "TransactionRow",
    "attribute_payments",
    "build_party_summary",
    "is_invoice_overdue",
    "match_payment_to_invoice",
    "note_matches_invoice",
    "settlement_payments",
    "summarize_by_month",
    "summarize_portfolio",
    "traced_engine",
]
