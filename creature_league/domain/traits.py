"""Token traits -> base stats and house-race stats.

Trait data comes from on-chain metadata and is not trusted: a token whose
description cannot be parsed yields None so that re-deriving a whole
collection never stops at one bad token.
"""
import json
import logging
from typing import Dict, Optional, Tuple

from creature_league.domain.stat_rules import PER_STAT_CAP, STAT_KEYS, round_half_up
from creature_league.models.schema_models import ParsedTraits, StatBlock

MATERIAL_QUALITY: Dict[str, int] = {
    "cyberium": 4,
    "diamond": 3,
    "golden": 2,
    "silver": 1,
}

# Rarity edge in house races (10% max).
RARITY_MULTIPLIER: Dict[str, float] = {
    "Common": 1.00,
    "Uncommon": 1.01,
    "Rare": 1.02,
    "Epic": 1.04,
    "Legendary": 1.05,
    "Mythic": 1.06,
    "Relic": 1.07,
    "Masterwork": 1.08,
    "Cyberium": 1.10,
}

MAX_BODY_PARTS = 10
DEFAULT_TOTAL_BASE = 60.0
DEFAULT_STAMINA_PER_PART = 0.5
DEFAULT_FOCUS_PER_QUALITY = 0.5


def _extract_trait_map(parsed) -> Optional[dict]:
    if not isinstance(parsed, dict):
        return None
    if "721" not in parsed:
        return parsed
    nested = parsed["721"]
    if not isinstance(nested, dict) or not nested:
        return None
    token_data = nested[next(iter(nested))]
    if not isinstance(token_data, dict):
        return None
    traits = token_data.get("traits") or token_data
    return traits if isinstance(traits, dict) else None


def parse_traits(description: str) -> Optional[ParsedTraits]:
    """Parse a token description in either the direct or the nested 721 form.

    Returns:
        Optional[ParsedTraits]: Parsed traits, or None if the description is malformed
    """
    try:
        traits = _extract_trait_map(json.loads(description))
    except (TypeError, ValueError) as e:
        logging.warning(f"unparseable trait description: {e}")
        return None
    if traits is None:
        logging.warning("trait description has no trait map")
        return None

    body_parts = []
    for index in range(1, MAX_BODY_PARTS + 1):
        part = traits.get(f"Body part {index}")
        if part:
            body_parts.append(str(part))

    material_quality = 0
    for part in body_parts:
        lower = part.lower()
        for material, quality in MATERIAL_QUALITY.items():
            if material in lower and quality > material_quality:
                material_quality = quality

    return ParsedTraits(
        rarity=str(traits.get("Rarity") or "Common"),
        pet=str(traits.get("Pet") or "Unknown"),
        skin_color=str(traits.get("Skin Color") or "Unknown"),
        background=str(traits.get("Background") or "Unknown"),
        stage=str(traits.get("Stage") or "1"),
        body_parts=body_parts,
        body_part_count=len(body_parts),
        material_quality=material_quality,
    )


def compute_base_stats(
    rarity: str,
    body_part_count: int,
    material_quality: int,
    base_stat_template: dict,
    trait_mapping: dict,
) -> StatBlock:
    """Derive permanent base stats from a token's traits.

    The rarity tier sets a stat bias and a total; unallocated points spread
    evenly, body parts add stamina, material quality adds focus, and the
    result is scaled back to the tier total when it overshoots.
    """
    tier = base_stat_template.get(rarity) or base_stat_template.get("Common") or {}
    total_base = float(tier.get("total_base", DEFAULT_TOTAL_BASE))
    bias = tier.get("bias") or {}

    stats = {key: float(bias.get(key, 0.0)) for key in STAT_KEYS}
    allocated = sum(stats.values())
    if allocated < total_base:
        per_stat = (total_base - allocated) / len(STAT_KEYS)
        for key in STAT_KEYS:
            stats[key] += per_stat

    stamina_per_part = (trait_mapping.get("body_part_count") or {}).get(
        "stamina_per_part", DEFAULT_STAMINA_PER_PART
    )
    focus_per_quality = (trait_mapping.get("material_quality") or {}).get(
        "focus_per_level", DEFAULT_FOCUS_PER_QUALITY
    )
    stats["stamina"] += body_part_count * stamina_per_part
    stats["focus"] += material_quality * focus_per_quality

    current_total = sum(stats[key] for key in STAT_KEYS)
    if current_total > total_base:
        scale = total_base / current_total
        stats = {key: value * scale for key, value in stats.items()}

    return StatBlock(
        **{
            key: round_half_up(min(PER_STAT_CAP, max(0.0, stats[key])), 2)
            for key in STAT_KEYS
        }
    )


def base_stats_from_description(
    description: str, base_stat_template: dict, trait_mapping: dict
) -> Optional[StatBlock]:
    traits = parse_traits(description)
    if traits is None:
        return None
    return compute_base_stats(
        traits.rarity,
        traits.body_part_count,
        traits.material_quality,
        base_stat_template,
        trait_mapping,
    )


def segment_stats(traits: ParsedTraits) -> Tuple[float, float]:
    """House-race ``(speed_multiplier, consistency)`` for a token.

    Consistency is 0.50 plus 0.04 per body part, capped at 0.82.
    """
    speed_multiplier = RARITY_MULTIPLIER.get(traits.rarity, 1.00)
    consistency = min(0.50 + traits.body_part_count * 0.04, 0.82)
    return round_half_up(speed_multiplier, 2), round_half_up(consistency, 2)
