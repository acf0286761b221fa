"""
Ledger Kernel

Typed records and point-in-time snapshots for the party ledger:
- Customers and suppliers with signed opening balances
- Sale/purchase invoices, debit/credit notes, payments
- Structured JSON logging and typed errors
- Read-only SQLAlchemy access to the backing store
"""

__version__ = "0.1.0"
