"""Store classes for persistent data management."""
from .json_store import BaseJSONStore
from .identity_store import IdentityStore
from .report_store import PersistResult, ReportStore

__all__ = [
    'BaseJSONStore',
    'IdentityStore',
    'PersistResult',
    'ReportStore',
]
