"""Adapters — the only code that talks to the host's external tools."""
