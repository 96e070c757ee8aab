"""Local transaction journal for the register"""

from typing import Optional

from ..models.transaction import Transaction, TransactionStatus
from ..services.transaction_assembler import with_status


class TransactionJournal:
    """In-memory record of finalized transactions.

    Holds every transaction the register completed, whether or not the
    backend confirmed it, so receipts and reprints keep working offline.
    """

    def __init__(self):
        self.transactions: dict[str, Transaction] = {}

    def record(self, transaction: Transaction) -> Transaction:
        """Add or replace a transaction"""
        self.transactions[transaction.id] = transaction
        return transaction

    def replace(self, local_id: str, confirmed: Transaction) -> Transaction:
        """Swap a locally assembled transaction for the server-confirmed one"""
        if local_id != confirmed.id:
            self.transactions.pop(local_id, None)
        return self.record(confirmed)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        """Get a transaction by ID"""
        return self.transactions.get(transaction_id)

    def get_by_number(self, transaction_number: str) -> Optional[Transaction]:
        """Get a transaction by its receipt number"""
        return next(
            (t for t in self.transactions.values() if t.transaction_number == transaction_number),
            None,
        )

    def update_status(self, transaction_id: str, status: TransactionStatus) -> Optional[Transaction]:
        """Update transaction status"""
        transaction = self.get(transaction_id)
        if not transaction:
            return None
        return self.record(with_status(transaction, status))

    def list_recent(self, limit: int = 50) -> list[Transaction]:
        """List recent transactions"""
        transactions = list(self.transactions.values())
        transactions.sort(key=lambda t: t.date, reverse=True)
        return transactions[:limit]


# Singleton instance
transaction_journal = TransactionJournal()
