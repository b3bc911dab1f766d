"""Core components of the legal text purifier."""
