"""Gatekeeper: physical-access decision gateway."""
