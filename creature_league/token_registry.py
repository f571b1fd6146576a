import json
import logging
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from creature_league.domain.traits import parse_traits
from creature_league.errors import RegistryLoadError
from creature_league.models.schema_models import ParsedTraits, TokenEntry

CIRCULATING = "circulating"


class TokenRegistry:
    """Collection token metadata, loaded explicitly and injected where needed.

    Nothing is read until ``load`` is called; ``refresh`` swaps in a new
    snapshot only when the reload succeeds.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._tokens: Dict[str, TokenEntry] = {}
        self.loaded = False

    def _read(self) -> Dict[str, TokenEntry]:
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
            entries = [TokenEntry.model_validate(token) for token in data["tokens"]]
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
            raise RegistryLoadError(f"Failed to load token data {self.path}: {e}") from e
        return {
            entry.token_id: entry for entry in entries if entry.status == CIRCULATING
        }

    def load(self) -> None:
        """Load the token data.

        Raises:
            RegistryLoadError: The file is missing or malformed
        """
        self._tokens = self._read()
        self.loaded = True
        logging.info(f"Loaded {len(self._tokens)} circulating tokens from {self.path}")

    def refresh(self) -> bool:
        """Reload the token data, keeping the previous snapshot on failure.

        Returns:
            bool: True if the new snapshot was installed
        """
        try:
            tokens = self._read()
        except RegistryLoadError as e:
            logging.error(f"Token refresh failed, keeping {len(self._tokens)} tokens: {e}")
            return False
        self._tokens = tokens
        self.loaded = True
        logging.info(f"Refreshed token data: {len(self._tokens)} circulating tokens")
        return True

    def get(self, token_id: str) -> Optional[TokenEntry]:
        return self._tokens.get(token_id)

    def traits_for(self, token_id: str) -> Optional[ParsedTraits]:
        entry = self.get(token_id)
        if entry is None:
            return None
        return parse_traits(entry.description)

    def __contains__(self, token_id: str) -> bool:
        return token_id in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)
