"""stargate — astronaut duty ledger CLI."""

__version__ = "0.1.0"
