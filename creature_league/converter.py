from typing import List, Optional

from creature_league.domain.stat_rules import NANO_PER_COIN, STAT_KEYS
from creature_league.models.schema_models import (
    RaceEntrantSnapshot,
    SegmentRaceEntrant,
    SegmentRaceResult,
    StatBlock,
)


def _first(row: dict, *keys, default=None):
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return default


class DataConverter:
    """This class is used to convert stored or published rows into engine models."""

    @staticmethod
    def _stat_block(stats: Optional[dict]) -> StatBlock:
        stats = stats or {}
        return StatBlock(**{key: float(stats.get(key) or 0.0) for key in STAT_KEYS})

    def convert_entry_row_to_snapshot(self, row: dict) -> RaceEntrantSnapshot:
        """Convert a race entry row to the snapshot the scorer consumes.

        Snapshot columns take priority. Older entries that have none fall
        back to the creature's current base stats and a neutral condition.

        Args:
            row (dict): Race entry row, optionally with a joined ``creatures`` row

        Returns:
            RaceEntrantSnapshot: Frozen entrant state
        """
        creature = row.get("creatures") or {}
        base = row.get("snapshot_base_stats") or creature.get("base_stats")
        trained = row.get("snapshot_trained_stats") or creature.get("trained_stats")
        fatigue = row.get("snapshot_fatigue")
        sharpness = row.get("snapshot_sharpness")
        return RaceEntrantSnapshot(
            creature_id=str(row["creature_id"]),
            base_stats=self._stat_block(base),
            trained_stats=self._stat_block(trained),
            fatigue=0.0 if fatigue is None else float(fatigue),
            sharpness=50.0 if sharpness is None else float(sharpness),
        )

    def convert_segment_entry_row(self, row: dict) -> SegmentRaceEntrant:
        return SegmentRaceEntrant(
            token_id=str(_first(row, "token_id", "nft_token_id", "nftTokenId")),
            name=_first(row, "name", "nft_name", "nftName", default=""),
            owner_address=_first(row, "owner_address", "ownerAddress", default=""),
            signature=_first(row, "signature", default=""),
            speed_multiplier=float(_first(row, "speed_multiplier", "speedMultiplier", default=1.0)),
            consistency=float(_first(row, "consistency", default=0.5)),
            is_house=bool(_first(row, "is_house", "isHouse", "is_house_nft", "isHouseNft", default=False)),
        )

    def convert_segment_result_row(self, row: dict) -> SegmentRaceResult:
        """Published results use camelCase keys; stored ones use snake_case."""
        return SegmentRaceResult(
            token_id=str(_first(row, "token_id", "nft_token_id", "nftTokenId")),
            name=_first(row, "name", "nft_name", "nftName", default=""),
            owner_address=_first(row, "owner_address", "ownerAddress", default=""),
            position=int(row["position"]),
            final_distance=float(_first(row, "final_distance", "finalDistance", default=0.0)),
            is_house=bool(_first(row, "is_house", "isHouse", "is_house_nft", "isHouseNft", default=False)),
            payout_amount=int(_first(row, "payout_amount", "payoutAmount", default=0)),
        )

    def convert_segment_rows(self, rows: List[dict]) -> List[SegmentRaceEntrant]:
        return [self.convert_segment_entry_row(row) for row in rows]

    @staticmethod
    def nano_to_coin(amount: int) -> float:
        return amount / NANO_PER_COIN
