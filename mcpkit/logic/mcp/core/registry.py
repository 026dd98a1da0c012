"""Registry of tools, prompts and resources.

Registration happens during setup; once a session is ready the registry is
frozen and only read from, so dispatch needs no locking.
"""

import logging
from typing import Union

from mcpkit.lib.exceptions import (
    DuplicateNameError,
    RegistrationError,
    UnknownPromptError,
    UnknownResourceError,
    UnknownToolError,
)
from mcpkit.logic.mcp.models.registry_entry import EntryKind, PromptEntry, ResourceEntry, ToolEntry

logger = logging.getLogger(__name__)

RegistryEntry = Union[ToolEntry, PromptEntry, ResourceEntry]

_UNKNOWN_ERRORS = {
    EntryKind.TOOL: UnknownToolError,
    EntryKind.PROMPT: UnknownPromptError,
    EntryKind.RESOURCE: UnknownResourceError,
}


class Registry:
    """Ordered, per-kind collection of registry entries keyed by name or uri."""

    def __init__(self):
        # dicts preserve insertion order, which is the order clients see in */list
        self._entries: dict[EntryKind, dict[str, RegistryEntry]] = {kind: {} for kind in EntryKind}
        self._frozen = False

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject further registration."""
        if not self._frozen:
            self._frozen = True
            logger.debug(
                f"Registry frozen with {len(self._entries[EntryKind.TOOL])} tools, "
                f"{len(self._entries[EntryKind.PROMPT])} prompts, "
                f"{len(self._entries[EntryKind.RESOURCE])} resources"
            )

    def _register(self, entry: RegistryEntry) -> None:
        if self._frozen:
            raise RegistrationError(
                f"Cannot register {entry.kind} '{entry.key}' after the server started serving",
                {"kind": str(entry.kind), "key": entry.key},
            )
        entries = self._entries[entry.kind]
        if entry.key in entries:
            raise DuplicateNameError(str(entry.kind), entry.key)
        entries[entry.key] = entry
        logger.debug(f"Registered {entry.kind}: {entry.key}")

    def register_tool(self, entry: ToolEntry) -> None:
        self._register(entry)

    def register_prompt(self, entry: PromptEntry) -> None:
        self._register(entry)

    def register_resource(self, entry: ResourceEntry) -> None:
        self._register(entry)

    def list(self, kind: EntryKind) -> list[RegistryEntry]:
        """Entries of one kind in registration order."""
        return list(self._entries[EntryKind(kind)].values())

    def lookup(self, kind: EntryKind, key: str) -> RegistryEntry:
        """
        Find an entry by name (tools, prompts) or uri (resources).

        Raises:
            UnknownToolError, UnknownPromptError, UnknownResourceError
        """
        kind = EntryKind(kind)
        try:
            return self._entries[kind][key]
        except KeyError:
            raise _UNKNOWN_ERRORS[kind](key) from None

    def has(self, kind: EntryKind) -> bool:
        return bool(self._entries[EntryKind(kind)])

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __repr__(self) -> str:
        return (
            f"Registry(tools={len(self._entries[EntryKind.TOOL])}, "
            f"prompts={len(self._entries[EntryKind.PROMPT])}, "
            f"resources={len(self._entries[EntryKind.RESOURCE])}, "
            f"frozen={self._frozen})"
        )
