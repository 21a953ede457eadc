"""Room-scoped chat: message persistence and the in-memory room relay."""
