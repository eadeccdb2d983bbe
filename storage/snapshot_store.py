"""
Snapshot Store

Persists the finalized price cache as JSON:

    {
        "BTCUSDT": {
            "prices": [{"name": "binance", "price": 28933.33}, ...],
            "aggregate": 28933.33
        }
    }

A NaN aggregate (pair with no observations) is written as null and read
back as NaN.
"""

from pathlib import Path
from typing import Union

from pydantic import ValidationError

from core.errors import PersistenceError
from core.logging import get_logger
from core.schemas import Snapshot


class SnapshotStore:
    """
    File-backed snapshot persistence.

    Example:
        >>> store = SnapshotStore("exchanges.json")
        >>> store.write(snapshot)
        >>> store.read()["BTCUSDT"].aggregate
        28933.33
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._logger = get_logger(__name__)

    def write(self, snapshot: Snapshot) -> None:
        """
        Raises:
            PersistenceError: If the file cannot be written
        """
        try:
            self.path.write_text(snapshot.model_dump_json(), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(
                f"Failed to write snapshot to {self.path}: {e}",
                path=str(self.path)
            ) from e

        self._logger.info(f"Snapshot with {len(snapshot)} pair(s) written to {self.path}")

    def read(self) -> Snapshot:
        """
        Raises:
            PersistenceError: If the file is missing or not a valid snapshot
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(
                f"Failed to read snapshot from {self.path}: {e}",
                path=str(self.path)
            ) from e

        try:
            return Snapshot.model_validate_json(content)
        except ValidationError as e:
            raise PersistenceError(
                f"Snapshot file {self.path} is invalid",
                path=str(self.path),
                context={"errors": e.errors()}
            ) from e
