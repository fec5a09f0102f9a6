"""Read models updated by the event bus."""
