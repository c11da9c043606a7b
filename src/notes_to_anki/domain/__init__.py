"""Domain layer: interfaces the sync core depends on."""
