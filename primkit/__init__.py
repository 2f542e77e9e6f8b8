"""Merkle trees, a BLAKE2s PRF and field-element input packing for proof systems."""

__version__ = "0.1.0"

__all__ = ["merkle", "merkle_path", "prf", "blake2s", "field_input"]