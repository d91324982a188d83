"""Feature modules for neo-identity."""
