"""Special-feature kinds, rarity tiers and the placement pass."""
