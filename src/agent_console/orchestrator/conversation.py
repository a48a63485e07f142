"""Conversation store interface and in-memory implementation.

The conversation list is owned by the surrounding application. The
orchestrator only needs to append entries, read and replace an entry by
handle, and scan from the tail; ConversationStore captures exactly that.
"""

from collections.abc import Iterator
from typing import Protocol

from agent_console.orchestrator.errors import UnknownEntryError
from agent_console.orchestrator.types import ConversationEntry, EntryHandle


class ConversationStore(Protocol):
    """Operations the orchestrator performs on a conversation list."""

    def append(self, entry: ConversationEntry) -> EntryHandle: ...

    def get(self, handle: EntryHandle) -> ConversationEntry: ...

    def replace(self, handle: EntryHandle, entry: ConversationEntry) -> None: ...

    def iter_from_tail(self) -> Iterator[tuple[EntryHandle, ConversationEntry]]: ...

    def __len__(self) -> int: ...


class InMemoryConversationStore:
    """List-backed conversation store; handles are list indices.

    Entries are never removed through this interface, so a handle stays valid
    for the lifetime of the store.
    """

    def __init__(self, entries: list[ConversationEntry] | None = None) -> None:
        self._entries: list[ConversationEntry] = list(entries) if entries else []

    def append(self, entry: ConversationEntry) -> EntryHandle:
        self._entries.append(entry)
        return len(self._entries) - 1

    def get(self, handle: EntryHandle) -> ConversationEntry:
        """Return the entry at ``handle``.

        Raises:
            UnknownEntryError: If the handle is out of range.
        """
        if not 0 <= handle < len(self._entries):
            raise UnknownEntryError(f"No conversation entry at index {handle}")
        return self._entries[handle]

    def replace(self, handle: EntryHandle, entry: ConversationEntry) -> None:
        """Replace the entry at ``handle`` in place.

        Raises:
            UnknownEntryError: If the handle is out of range.
        """
        self.get(handle)
        self._entries[handle] = entry

    def iter_from_tail(self) -> Iterator[tuple[EntryHandle, ConversationEntry]]:
        for index in range(len(self._entries) - 1, -1, -1):
            yield index, self._entries[index]

    @property
    def entries(self) -> list[ConversationEntry]:
        """Snapshot of the entries, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
