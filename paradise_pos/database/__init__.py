# Storage modules

from .held_sales import held_sale_store, HeldSaleStore, HeldSaleNotFoundError
from .transactions import transaction_journal, TransactionJournal

__all__ = [
    "held_sale_store",
    "HeldSaleStore",
    "HeldSaleNotFoundError",
    "transaction_journal",
    "TransactionJournal",
]
