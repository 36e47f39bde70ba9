"""Club API route modules, one per entity."""
