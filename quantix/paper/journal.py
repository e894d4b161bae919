"""Trading journal: notes and tags attached to transactions by id.

Transactions are never rewritten; notes live beside them and reference them
softly (the id is not checked against the log).
"""
from __future__ import annotations
from datetime import datetime
from typing import Callable, Iterable, Optional

from .state import JournalEntry, WalletState, local_now, new_id


class Journal:
    def __init__(self, state: WalletState, clock: Callable[[], datetime] = local_now):
        self.state = state
        self._clock = clock

    def add_note(self, transaction_id: str, note: str, tags: Iterable[str] = ()) -> JournalEntry:
        now = self._clock()
        entry = JournalEntry(
            id=new_id(),
            transaction_id=transaction_id,
            note=note,
            tags=list(tags),
            created_at=now,
            updated_at=now,
        )
        self.state.journal_entries.append(entry)
        return entry

    def update_note(self, entry_id: str, note: str, tags: Optional[Iterable[str]] = None) -> Optional[JournalEntry]:
        """Rewrite an entry's text (and tags, when given). None if the entry does not exist."""
        for entry in self.state.journal_entries:
            if entry.id == entry_id:
                entry.note = note
                if tags is not None:
                    entry.tags = list(tags)
                entry.updated_at = self._clock()
                return entry
        return None

    def get_for_transaction(self, transaction_id: str) -> Optional[JournalEntry]:
        for entry in self.state.journal_entries:
            if entry.transaction_id == transaction_id:
                return entry
        return None
