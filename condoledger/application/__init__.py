from .application import HasLifecycle, LedgerApplication

__all__ = ["HasLifecycle", "LedgerApplication"]
