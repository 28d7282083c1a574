from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def smart_transaction(session: Session) -> Iterator:
    """
    Run the block in a transaction on `session`, rolled back if it raises.

    A fresh session gets a real BEGIN/COMMIT. A session already inside a
    transaction (autobegun by an earlier read, or owned by the caller)
    gets a SAVEPOINT instead, and the outer commit stays with whoever
    opened it.

        with smart_transaction(db):
            item = repo.get(item_id, for_update=True)
            ...
    """
    if session.in_transaction():
        cm = session.begin_nested()
    else:
        cm = session.begin()
    with cm:
        yield
