"""Storage backends for the vote ledger blob."""

import json
import os
import tempfile
from typing import Iterable, Protocol, Set

from loguru import logger


class LedgerStorage(Protocol):
    """
    A protocol that defines how the ledger's set of record numbers is kept.

    Any backend (file, key-value store, memory) can be used interchangeably
    by ``VoteLedger``.
    """

    def load(self) -> Set[int]:
        """
        Load the stored record numbers.

        Returns:
            The stored set; an empty set when nothing usable is stored.
        """
        ...

    def save(self, numbers: Set[int]) -> None:
        """
        Replace the stored record numbers.

        Args:
            numbers: Complete set to persist.
        """
        ...


def _coerce_numbers(raw: Iterable) -> Set[int]:
    numbers = set()
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"Invalid record number in ledger: {value!r}")
        numbers.add(value)
    return numbers


class JsonFileLedgerStorage:
    """JSON file implementation of the LedgerStorage interface."""

    def __init__(self, path: str):
        """
        Initialize the storage with a file path.

        Args:
            path: Path to the JSON file
        """
        self.path = path

    def _ensure_directory(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def load(self) -> Set[int]:
        if not os.path.exists(self.path):
            return set()
        try:
            with open(self.path, "r", encoding="utf-8") as file:
                raw = json.load(file)
            if not isinstance(raw, list):
                raise ValueError(f"Expected a JSON array, got {type(raw).__name__}")
            numbers = _coerce_numbers(raw)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable vote ledger at {self.path}: {e}")
            return set()
        logger.debug(f"Loaded {len(numbers)} voted records from {self.path}")
        return numbers

    def save(self, numbers: Set[int]) -> None:
        self._ensure_directory()
        directory = os.path.dirname(self.path) or "."
        # Write to a sibling temp file so readers never see a partial blob
        fd, tmp_path = tempfile.mkstemp(prefix=".ledger-", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file:
                json.dump(sorted(numbers), file)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


class InMemoryLedgerStorage:
    """Process-local LedgerStorage, used for tests and ephemeral sessions."""

    def __init__(self, numbers: Iterable[int] = ()):
        self._numbers = set(numbers)

    def load(self) -> Set[int]:
        return set(self._numbers)

    def save(self, numbers: Set[int]) -> None:
        self._numbers = set(numbers)
