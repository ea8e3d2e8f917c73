"""Infrastructure layer: caching, Directory Store and audit implementations."""
