"""
The pattern library store.

The library is the concatenation of an immutable built-in set and a mutable
user set. Only entries with user provenance can be edited or deleted; the
check is enforced here regardless of what the caller offers its users. The
user set is written back to key-value storage after every mutation.
"""

import json
import logging
import uuid
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from regexbuilder.config import DEFAULT_STORAGE_KEY
from regexbuilder.errors import ImportFormatError
from regexbuilder.types import USER_ID_PREFIX, PatternEntry, User, provenance_of

from .builtins import default_builtin_patterns
from .storage import KeyValueStorage, MemoryStorage

logger = logging.getLogger(__name__)

CUSTOM_CATEGORY = "Custom"
"""Category given to user entries created or updated without one."""

_MUTABLE_FIELDS = frozenset({"name", "pattern", "description", "category", "flags"})

_ENTRY_LIST = TypeAdapter(list[PatternEntry])


class ImportedEntry(BaseModel):
    """A record of a bulk import file. Unlike PatternEntry, the id may be omitted."""

    id: str | None = None
    name: str
    pattern: str
    description: str = ""
    category: str | None = None
    flags: str | None = None


_IMPORT_LIST = TypeAdapter(list[ImportedEntry])


def _new_user_id(taken: set[str]) -> str:
    while True:
        candidate = f"{USER_ID_PREFIX}{uuid.uuid4().hex}"
        if candidate not in taken:
            return candidate


class PatternLibrary:
    """Merges built-in and user patterns and guards user-only mutations."""

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        *,
        builtins: Iterable[PatternEntry] | None = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        """
        Initialize the library and load the user set from storage.

        Args:
            storage: Durable key-value storage for the user set.
            builtins: The built-in entries. Defaults to the shipped set.
            storage_key: The fixed key the user set is stored under.

        """
        self.storage = storage if storage is not None else MemoryStorage()
        self.storage_key = storage_key
        self.builtins: tuple[PatternEntry, ...] = tuple(builtins) if builtins is not None else default_builtin_patterns()
        self._user_patterns: list[PatternEntry] = self._load()

    @property
    def user_patterns(self) -> tuple[PatternEntry, ...]:
        """Return the user-authored entries in creation order."""
        return tuple(self._user_patterns)

    def all(self) -> list[PatternEntry]:
        """Return built-in entries followed by user entries."""
        return [*self.builtins, *self._user_patterns]

    def get(self, entry_id: str) -> PatternEntry | None:
        """Return the first entry with the given id, or None."""
        return next((entry for entry in self.all() if entry.id == entry_id), None)

    def list_patterns(self, query: str | None = None) -> dict[str, list[PatternEntry]]:
        """
        Search the library and group the result by category.

        Args:
            query: Case-insensitive substring to look for in the name,
                description, pattern text, or category. None or empty keeps all.

        Returns:
            Entries grouped by category in first-seen order. Entries without a
            category are grouped under "Other".

        """
        entries = self.all()
        if query:
            needle = query.lower()
            entries = [
                entry
                for entry in entries
                if needle in entry.name.lower()
                or needle in entry.description.lower()
                or needle in entry.pattern.lower()
                or (entry.category is not None and needle in entry.category.lower())
            ]

        grouped: dict[str, list[PatternEntry]] = {}
        for entry in entries:
            grouped.setdefault(entry.group, []).append(entry)
        return grouped

    def create(
        self,
        name: str,
        pattern: str,
        description: str = "",
        category: str | None = None,
        flags: str | None = None,
    ) -> PatternEntry | None:
        """
        Add a user entry.

        Returns:
            The new entry, or None if name or pattern is empty.

        """
        if not name or not pattern:
            logger.debug("Rejected pattern creation with an empty name or pattern.")
            return None

        entry = PatternEntry(
            id=_new_user_id({e.id for e in self.all()}),
            name=name,
            pattern=pattern,
            description=description,
            category=category or CUSTOM_CATEGORY,
            flags=flags,
        )
        self._user_patterns.append(entry)
        self._save()
        logger.info("Created pattern '%s' (%s).", entry.name, entry.id)
        return entry

    def update(self, entry_id: str, **fields: Any) -> PatternEntry | None:  # noqa: ANN401
        """
        Replace mutable fields of a user entry.

        Built-in ids, unknown ids, and updates that would empty the name or the
        pattern are rejected without any change.

        Returns:
            The updated entry, or None if the update was rejected.

        Raises:
            TypeError: If a field other than name, pattern, description,
                category or flags is given.

        """
        unknown = set(fields) - _MUTABLE_FIELDS
        if unknown:
            msg = f"Cannot update field(s): {', '.join(sorted(unknown))}"
            raise TypeError(msg)

        if not isinstance(provenance_of(entry_id), User):
            logger.debug("Rejected update of built-in pattern '%s'.", entry_id)
            return None
        if ("name" in fields and not fields["name"]) or ("pattern" in fields and not fields["pattern"]):
            logger.debug("Rejected update of '%s' with an empty name or pattern.", entry_id)
            return None

        for index, entry in enumerate(self._user_patterns):
            if entry.id == entry_id:
                if "category" in fields:
                    fields["category"] = fields["category"] or CUSTOM_CATEGORY
                updated = entry.model_copy(update=fields)
                self._user_patterns[index] = updated
                self._save()
                logger.info("Updated pattern '%s' (%s).", updated.name, updated.id)
                return updated

        logger.debug("Rejected update of unknown pattern '%s'.", entry_id)
        return None

    def delete(self, entry_id: str) -> bool:
        """
        Remove a user entry.

        Returns:
            True if an entry was removed. Built-in and unknown ids return False.

        """
        if not isinstance(provenance_of(entry_id), User):
            logger.debug("Rejected deletion of built-in pattern '%s'.", entry_id)
            return False

        remaining = [entry for entry in self._user_patterns if entry.id != entry_id]
        if len(remaining) == len(self._user_patterns):
            return False
        self._user_patterns = remaining
        self._save()
        logger.info("Deleted pattern '%s'.", entry_id)
        return True

    def export_all(self) -> str:
        """Serialize the user set as a JSON array."""
        return json.dumps(self._dump(), indent=2, ensure_ascii=False)

    def import_many(self, payload: str | bytes | list[Any]) -> list[PatternEntry]:
        """
        Append every entry of a bulk import to the user set.

        The payload is a JSON array (or an already parsed list) of
        PatternEntry-shaped objects. Entries are not deduplicated. Ids without
        user provenance, missing ids, and ids already in use are replaced by
        fresh user ids.

        Returns:
            The entries that were added.

        Raises:
            ImportFormatError: If the payload is not a well-formed list of
                entries. The user set is left untouched.

        """
        try:
            data = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
            records = _IMPORT_LIST.validate_python(data)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            msg = f"Failed to import patterns. Please check the file format: {e}"
            raise ImportFormatError(msg) from e

        taken = {entry.id for entry in self.all()}
        added: list[PatternEntry] = []
        for record in records:
            entry_id = record.id
            if entry_id is None or entry_id in taken or not isinstance(provenance_of(entry_id), User):
                entry_id = _new_user_id(taken)
            taken.add(entry_id)
            added.append(PatternEntry(**record.model_dump(exclude={"id"}), id=entry_id))

        self._user_patterns.extend(added)
        self._save()
        logger.info("Imported %d patterns.", len(added))
        return added

    def _dump(self) -> list[dict[str, Any]]:
        return [entry.model_dump(exclude_none=True) for entry in self._user_patterns]

    def _load(self) -> list[PatternEntry]:
        raw = self.storage.get(self.storage_key)
        if raw is None:
            logger.debug("No stored user patterns. Starting with an empty set.")
            return []
        try:
            entries = _ENTRY_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning("Failed to load user patterns, starting with an empty set: %s", e)
            return []
        logger.debug("Loaded %d user patterns.", len(entries))
        return entries

    def _save(self) -> None:
        self.storage.set(self.storage_key, json.dumps(self._dump(), ensure_ascii=False))
