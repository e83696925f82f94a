"""Anonymous interest-based two-party chat server."""
