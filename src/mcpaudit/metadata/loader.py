"""Read the Metadata Provider's JSON document into the capability model.

The provider (a separate tool that reflects over compiled assemblies) writes
``{"Assemblies": [{"AssemblyPath", "Classes": [{"TypeName", "Kind",
"Description", "Audiences", "Members": [...]}]}]}`` with PascalCase keys.
Keys are matched ignoring case and underscores, so camelCase and snake_case
documents read the same way.

Structural problems inside an otherwise valid document are not fatal: the
offending group or member is skipped and a warning is logged.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from mcpaudit.metadata.models import (
    GROUP_MEMBER_KIND,
    AssemblyMetadata,
    Capability,
    CapabilityGroup,
    DiscoveryResult,
    make_capability,
    make_group,
)

logger = logging.getLogger(__name__)

_GROUP_KINDS = {
    "tooltype": "tool_group",
    "toolgroup": "tool_group",
    "resourcetype": "resource_group",
    "resourcegroup": "resource_group",
    "prompttype": "prompt_group",
    "promptgroup": "prompt_group",
}

_MEMBER_KINDS = {
    "tool": "tool",
    "resource": "resource",
    "prompt": "prompt",
}


class MetadataError(Exception):
    """Raised when the metadata document cannot be read at all."""


def _fold(value: Any) -> str:
    return str(value).replace("_", "").replace("-", "").lower() if value is not None else ""


def _fold_keys(entry: Dict[str, Any]) -> Dict[str, Any]:
    """Re-key *entry* so 'AssemblyPath', 'assemblyPath' and 'assembly_path' agree."""
    return {_fold(k): v for k, v in entry.items()}


def _first(entry: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in entry:
            return entry[key]
    return None


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _audiences(entry: Dict[str, Any]) -> List[str]:
    raw = entry.get("audiences") or []
    if isinstance(raw, str):
        return [raw]
    if not isinstance(raw, list):
        return []
    return [a for a in raw if isinstance(a, str)]


def _parse_member(entry: Any, owner: str, default_kind: str) -> Optional[Capability]:
    if not isinstance(entry, dict):
        logger.warning("Skipping non-object member in %s", owner)
        return None
    entry = _fold_keys(entry)
    member_name = _as_str(_first(entry, "methodname", "membername"))
    if not member_name or not member_name.strip():
        logger.warning("Skipping member without a method name in %s", owner)
        return None
    raw_kind = entry.get("kind")
    kind = _MEMBER_KINDS.get(_fold(raw_kind)) if raw_kind is not None else default_kind
    if kind is None:
        logger.warning("Skipping %s.%s: unknown member kind %r", owner, member_name, raw_kind)
        return None
    return make_capability(
        owner,
        member_name.strip(),
        kind,  # type: ignore[arg-type]
        name=_as_str(entry.get("name")),
        title=_as_str(entry.get("title")),
        description=_as_str(entry.get("description")),
        audiences=_audiences(entry),
    )


def _parse_group(entry: Any) -> Optional[CapabilityGroup]:
    if not isinstance(entry, dict):
        logger.warning("Skipping non-object class entry")
        return None
    entry = _fold_keys(entry)
    type_name = _as_str(entry.get("typename"))
    if not type_name or not type_name.strip():
        logger.warning("Skipping class entry without a type name")
        return None
    type_name = type_name.strip()
    kind = _GROUP_KINDS.get(_fold(entry.get("kind")))
    if kind is None:
        logger.warning("Skipping %s: unknown class kind %r", type_name, entry.get("kind"))
        return None

    raw_members = entry.get("members") or []
    if not isinstance(raw_members, list):
        logger.warning("Skipping %s: 'members' is not a list", type_name)
        return None
    members = [
        m for m in (_parse_member(raw, type_name, GROUP_MEMBER_KIND[kind]) for raw in raw_members)
        if m is not None
    ]
    group = make_group(
        type_name,
        kind,  # type: ignore[arg-type]
        members,
        description=_as_str(entry.get("description")),
        audiences=_audiences(entry),
    )
    if group is None:
        logger.debug("Dropping %s: no members", type_name)
    return group


def parse_metadata(data: Any) -> DiscoveryResult:
    """Convert a decoded metadata document into a DiscoveryResult."""
    if not isinstance(data, dict):
        raise MetadataError("Metadata document must be a JSON object")
    data = _fold_keys(data)
    if "assemblies" not in data:
        logger.warning("Metadata document has no 'assemblies' key; nothing to analyze")
    raw_assemblies = data.get("assemblies") or []
    if not isinstance(raw_assemblies, list):
        raise MetadataError("'assemblies' must be a list")

    assemblies: List[AssemblyMetadata] = []
    for raw in raw_assemblies:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object assembly entry")
            continue
        raw = _fold_keys(raw)
        path = _as_str(raw.get("assemblypath")) or "<unknown>"
        raw_groups = _first(raw, "classes", "groups") or []
        if not isinstance(raw_groups, list):
            logger.warning("Skipping %s: class list is not a list", path)
            continue
        groups = tuple(g for g in (_parse_group(item) for item in raw_groups) if g is not None)
        if groups:
            assemblies.append(AssemblyMetadata(assembly_path=path, groups=groups))
    return DiscoveryResult(assemblies=tuple(assemblies))


def load_metadata(path: Path) -> DiscoveryResult:
    """Read and parse a metadata JSON file."""
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise MetadataError(f"Cannot read metadata file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise MetadataError(f"Metadata file {path} is not valid UTF-8: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MetadataError(f"Metadata file {path} is not valid JSON: {exc}") from exc
    result = parse_metadata(data)
    logger.debug(
        "Loaded %d group(s), %d capability(ies) from %s",
        result.total_groups, result.total_capabilities, path,
    )
    return result
