"""Game rule engines. Each game is action-sourced and has no I/O of its own."""
