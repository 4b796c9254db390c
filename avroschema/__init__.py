"""Avro schemas: parsing, canonical forms, fingerprints, compatibility checks, binary writing, type resolution and registry access."""

__version__ = "0.1.0"

__all__ = ["base", "named", "parse", "compatibility", "writer", "resolver", "registry"]