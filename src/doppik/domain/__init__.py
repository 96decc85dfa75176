"""Domain layer for doppik application.

Services are imported lazily: the database layer imports
``doppik.domain.entities`` and the services import the database layer.
"""

_SERVICES = {
    "AccountService": "doppik.domain.account",
    "ContactService": "doppik.domain.contact",
    "TransactionService": "doppik.domain.transaction",
    "LedgerService": "doppik.domain.ledger",
    "StatementService": "doppik.domain.statements",
    "ClosingService": "doppik.domain.closing",
    "ReversalService": "doppik.domain.reversal",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        module = importlib.import_module(_SERVICES[name])
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
