"""Serialized forms of typed errors."""
