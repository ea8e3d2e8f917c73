"""Authorization domain: entities, value objects, protocols and the hierarchy graph."""
