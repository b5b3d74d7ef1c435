"""Asset relocation utilities for vellum documents."""

from .relocate import HashSuffix, KeepFirst, RelocatedAsset, get_collision_policy, relocate_assets
from .rewrite import rewrite_references
from .scanner import AssetRef, find_references

__all__ = [
    "find_references",
    "relocate_assets",
    "rewrite_references",
    "get_collision_policy",
    "AssetRef",
    "RelocatedAsset",
    "KeepFirst",
    "HashSuffix",
]
