"""Vault loading and link index utilities."""

from .index import DictLinkIndex, LinkIndex, VaultLinkIndex
from .loader import Note, Vault, load_vault
from .parser import extract_aliases, extract_links

__all__ = [
    "load_vault",
    "Note",
    "Vault",
    "extract_aliases",
    "extract_links",
    "LinkIndex",
    "VaultLinkIndex",
    "DictLinkIndex",
]
