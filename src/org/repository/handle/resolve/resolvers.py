"""Resource resolver table.

Each entry teaches the registry how to deal with one resource kind: how to
load an object by id, how to recognise an object of that kind, and where
objects of that kind are disseminated. Supporting a new kind means adding an
entry here, not changing the registry.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from org.repository.handle.model.items import find_item, item_id_of
from org.repository.handle.model.resource_types import ResourceType

if TYPE_CHECKING:
    from org.repository.handle.app.config import Settings

FindResource = Callable[[AsyncSession, int], Awaitable[Optional[Any]]]
IdentifyResource = Callable[[Any], Optional[int]]


@dataclass(frozen=True)
class ResourceResolver:
    """Resolution capability for one resource kind.

    Attributes:
        resource_type: The tag stored on handle records of this kind
        find: Loads the object for a resource id, None if it no longer exists
        identify: Returns the resource id of an object of this kind, None for anything else
        url_prefix: Base dissemination URL for this kind, None if not configured
        url_prefix_setting: Name of the configuration property holding url_prefix
    """

    resource_type: ResourceType
    find: FindResource
    identify: IdentifyResource
    url_prefix: Optional[str] = None
    url_prefix_setting: str = ""


ResolverTable = Mapping[ResourceType, ResourceResolver]


def default_resolvers(settings: "Settings") -> Dict[ResourceType, ResourceResolver]:
    return {
        ResourceType.ITEM: ResourceResolver(
            resource_type=ResourceType.ITEM,
            find=find_item,
            identify=item_id_of,
            url_prefix=settings.handle_item_url_prefix,
            url_prefix_setting="handle.item.url.prefix",
        ),
    }
