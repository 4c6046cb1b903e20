"""
Transaction handling for export operations.
"""
import logging
import threading
from collections.abc import Iterable, Sequence
from typing import Any

from schemaexport.connection import ConnectionWrapper

logger = logging.getLogger(__name__)


_local = threading.local()


class Transaction:
    """Context manager that runs every statement of an export in one transaction.

    The transaction is begun on enter and committed on a clean exit. On an
    exception it is rolled back and the exception propagates; nothing is
    retried. Nested transactions on the same connection are not supported.

    Examples
        with Transaction(cn) as tx:
            tx.execute('create table if not exists ...')
            tx.executemany('insert into ...', rows)
    """

    def __init__(self, cn: ConnectionWrapper) -> None:
        self.connection = cn

        if not hasattr(_local, 'active_transactions'):
            _local.active_transactions = {}

        if id(cn) in _local.active_transactions:
            raise RuntimeError('Nested transactions are not supported')

    @property
    def strategy(self):
        return self.connection.strategy

    def __enter__(self):
        _local.active_transactions[id(self.connection)] = True
        try:
            self.strategy.begin(self.connection)
        except Exception:
            _local.active_transactions.pop(id(self.connection), None)
            raise
        logger.debug(f'Started transaction for connection {id(self.connection)}')
        return self

    def __exit__(self, exc_type: type | None, value: Exception | None, traceback: Any | None) -> None:
        try:
            if exc_type is not None:
                self.strategy.rollback(self.connection)
                logger.warning('Rolling back the current transaction')
            else:
                self.strategy.commit(self.connection)
                logger.debug(f'Committed transaction for connection {id(self.connection)}')
        finally:
            _local.active_transactions.pop(id(self.connection), None)

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Execute SQL within transaction context"""
        return self.connection.execute(sql, params)

    def executemany(self, sql: str, rows: Iterable[Sequence[Any]]) -> int:
        """Execute SQL once per parameter row within transaction context"""
        return self.connection.executemany(sql, rows)
