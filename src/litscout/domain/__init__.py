"""Pure domain logic for discovery ingestion and publish governance."""
