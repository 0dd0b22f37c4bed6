"""Infrastructure layer: persistence adapters implementing application ports."""
