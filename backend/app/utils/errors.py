"""Exception types shared between the persistence layer and the API handlers."""

from typing import Dict, List


class DocumentValidationError(Exception):
    """Raised when a document violates storage-level constraints on insert/update.

    Carries every violation found, not only the first one.
    """

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        super().__init__("; ".join(f"{e['field']}: {e['message']}" for e in errors))
