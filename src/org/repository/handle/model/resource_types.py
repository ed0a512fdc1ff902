"""Resource type tags for objects addressable by a handle."""

from enum import IntEnum


class ResourceType(IntEnum):
    """Repository object kinds.

    Values match the type ids stored in ``handle.resource_type_id``.
    """

    BITSTREAM = 0
    BUNDLE = 1
    ITEM = 2
    COLLECTION = 3
    COMMUNITY = 4
    SITE = 5
    GROUP = 6
    EPERSON = 7
