# finanzas/deps.py
from datetime import datetime
from typing import Callable

from finanzas.core.store import PgStore

_store = PgStore()

def get_store():
    return _store

def get_reloj() -> Callable[[], datetime]:
    return datetime.now
