#!/usr/bin/env python3
"""
master_types.py
---------------
Per-type configuration for the eleven master data variants.

Each master data type is described by a MasterTypeConfig that specifies:
- The identifying field(s) used for duplicate detection
- The optional parent field narrowing the duplicate scope
- The field sets accepted on create/update, grouped by how they are
  normalized (plain strings, string lists, token lists, links, photos,
  free-form objects, merged objects, integers)
- Defaults applied after every write
- Fields that are always cleared for the type
- Which propagation path (if any) a rename triggers

Usage:
    from catalog.database.managers.master_types import get_type_config

    config = get_type_config("actress")
    config.key_for("1729-abc")      # "master_actress_1729-abc"
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from catalog.core.exceptions import ValidationError

# Propagation paths a rename may trigger
PROPAGATE_CAST = "cast"
PROPAGATE_LABEL = "label"

CAST_TYPES = ("actor", "actress", "director")
LABEL_TYPES = ("tag", "type")


@dataclass(frozen=True)
class MasterTypeConfig:
    """
    Configuration for one master data type.

    Attributes:
        type_name: Type identifier used in keys and payloads
        display_name: Human-readable name for error messages
        name_fields: Identifying field(s); more than one means "any of"
        parent_field: Field holding the parent id that scopes uniqueness
        parent_label: Human-readable name of the parent field
        string_fields: Optional trimmed string fields
        list_fields: Lists of non-blank strings
        token_list_fields: Comma-joined name lists stored as strings
        object_fields: Free-form JSON values replaced wholesale
        merged_object_fields: JSON objects merged key-wise into the stored one
        int_fields: Integer fields
        links_field: Field holding labeled links, if the type has one
        has_photos: Whether profilePicture/photo are managed together
        defaults: Values applied when a field is missing after a write
        cleared_fields: Fields always removed for this type
        propagation: Propagation path triggered by a rename, or None
    """

    type_name: str
    display_name: str
    name_fields: Tuple[str, ...] = ("name",)
    parent_field: Optional[str] = None
    parent_label: Optional[str] = None
    string_fields: Tuple[str, ...] = ()
    list_fields: Tuple[str, ...] = ()
    token_list_fields: Tuple[str, ...] = ()
    object_fields: Tuple[str, ...] = ()
    merged_object_fields: Tuple[str, ...] = ()
    int_fields: Tuple[str, ...] = ()
    links_field: Optional[str] = None
    has_photos: bool = False
    defaults: Dict[str, Any] = field(default_factory=dict)
    cleared_fields: Tuple[str, ...] = ()
    propagation: Optional[str] = None

    @property
    def prefix(self) -> str:
        """Key prefix of the type's partition."""
        return f"master_{self.type_name}_"

    def key_for(self, item_id: str) -> str:
        """Full store key of an item."""
        return f"{self.prefix}{item_id}"

    @property
    def is_hierarchical(self) -> bool:
        """Whether uniqueness is scoped by a parent id."""
        return self.parent_field is not None

    def identifying_name(self, item: Dict[str, Any]) -> Optional[str]:
        """
        Name used to detect a rename of the item.

        Returns the first non-empty identifying field; for series this is
        titleEn, falling back to titleJp.
        """
        for name_field in self.name_fields:
            value = item.get(name_field)
            if isinstance(value, str) and value:
                return value
        return None


_CAST_STRINGS = (
    "jpname",
    "kanjiName",
    "kanaName",
    "birthdate",
    "alias",
)
_GROUP_MEMBERSHIP = ("groupId", "selectedGroups", "generationData", "lineupData")


ACTOR_CONFIG = MasterTypeConfig(
    type_name="actor",
    display_name="actor",
    string_fields=_CAST_STRINGS + ("groupId",),
    list_fields=("selectedGroups",),
    token_list_fields=("tags",),
    object_fields=("generationData",),
    merged_object_fields=("lineupData",),
    links_field="links",
    has_photos=True,
    cleared_fields=("takulinks",),
    propagation=PROPAGATE_CAST,
)

ACTRESS_CONFIG = MasterTypeConfig(
    type_name="actress",
    display_name="actress",
    string_fields=_CAST_STRINGS + ("groupId", "takulinks"),
    list_fields=("selectedGroups",),
    token_list_fields=("tags",),
    object_fields=("generationData",),
    merged_object_fields=("lineupData",),
    links_field="links",
    has_photos=True,
    propagation=PROPAGATE_CAST,
)

DIRECTOR_CONFIG = MasterTypeConfig(
    type_name="director",
    display_name="director",
    string_fields=_CAST_STRINGS,
    token_list_fields=("tags",),
    links_field="links",
    has_photos=True,
    cleared_fields=_GROUP_MEMBERSHIP + ("takulinks",),
    propagation=PROPAGATE_CAST,
)

SERIES_CONFIG = MasterTypeConfig(
    type_name="series",
    display_name="series",
    name_fields=("titleEn", "titleJp"),
    string_fields=("seriesLinks",),
)

STUDIO_CONFIG = MasterTypeConfig(
    type_name="studio",
    display_name="studio",
    string_fields=("jpname", "kanjiName", "kanaName", "alias", "studioLinks"),
)

LABEL_CONFIG = MasterTypeConfig(
    type_name="label",
    display_name="label",
    string_fields=("jpname", "kanjiName", "kanaName", "labelLinks"),
)

TAG_CONFIG = MasterTypeConfig(
    type_name="tag",
    display_name="tag",
    propagation=PROPAGATE_LABEL,
)

TYPE_CONFIG = MasterTypeConfig(
    type_name="type",
    display_name="type",
    propagation=PROPAGATE_LABEL,
)

GROUP_CONFIG = MasterTypeConfig(
    type_name="group",
    display_name="group",
    string_fields=("jpname", "profilePicture", "website", "description"),
    list_fields=("gallery",),
)

GENERATION_CONFIG = MasterTypeConfig(
    type_name="generation",
    display_name="generation",
    parent_field="groupId",
    parent_label="Group ID",
    string_fields=(
        "groupName",
        "estimatedYears",
        "startDate",
        "endDate",
        "description",
        "profilePicture",
    ),
)

LINEUP_CONFIG = MasterTypeConfig(
    type_name="lineup",
    display_name="lineup",
    parent_field="generationId",
    parent_label="Generation ID",
    string_fields=("generationName", "lineupType", "description"),
    int_fields=("lineupOrder",),
    defaults={"lineupType": "Main", "lineupOrder": 1},
)


MASTER_TYPES: Dict[str, MasterTypeConfig] = {
    config.type_name: config
    for config in (
        ACTOR_CONFIG,
        ACTRESS_CONFIG,
        DIRECTOR_CONFIG,
        SERIES_CONFIG,
        STUDIO_CONFIG,
        LABEL_CONFIG,
        TAG_CONFIG,
        TYPE_CONFIG,
        GROUP_CONFIG,
        GENERATION_CONFIG,
        LINEUP_CONFIG,
    )
}

VALID_TYPES: List[str] = list(MASTER_TYPES)


def get_type_config(type_name: Optional[str]) -> MasterTypeConfig:
    """
    Look up the configuration of a master data type.

    Args:
        type_name: Type identifier

    Returns:
        MasterTypeConfig for the type

    Raises:
        ValidationError: If the type is missing or unknown
    """
    if not type_name:
        raise ValidationError("Type parameter is required")
    config = MASTER_TYPES.get(type_name)
    if config is None:
        raise ValidationError(
            f"Invalid type parameter: {type_name}",
            details=f"Valid types are: {', '.join(VALID_TYPES)}",
        )
    return config
