"""Application use cases (orchestration over repository ports)."""
