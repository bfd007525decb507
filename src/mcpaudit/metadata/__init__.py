"""Capability model and Metadata Provider document loading."""

from mcpaudit.metadata.loader import MetadataError, load_metadata, parse_metadata
from mcpaudit.metadata.models import (
    AssemblyMetadata,
    Capability,
    CapabilityGroup,
    DiscoveryResult,
    make_capability,
    make_group,
)

__all__ = [
    "AssemblyMetadata",
    "Capability",
    "CapabilityGroup",
    "DiscoveryResult",
    "MetadataError",
    "load_metadata",
    "make_capability",
    "make_group",
    "parse_metadata",
]
