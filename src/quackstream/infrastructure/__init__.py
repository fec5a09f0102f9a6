"""In-process event log and event bus."""
