"""
nanotrust — Primitives

Shared data types: publications and signature elements.
"""

from nanotrust.primitives.publication import Publication
from nanotrust.primitives.signature import SignatureElement

__all__ = ["Publication", "SignatureElement"]
