"""Handle registry service.

Resolves handles to dissemination URLs and repository objects, maps objects
back to their handles, and mints new handles under the site prefix.

The registry is stateless. Every data-touching method runs on the
``AsyncSession`` passed in by the caller, and the registry never begins or
commits a transaction itself.
"""

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from org.repository.handle.app.metrics import MetricsClient, NoOpMetricsClient
from org.repository.handle.model.handles import HandleRecord
from org.repository.handle.resolve.errors import (
    ConfigurationMissing,
    CorruptRecord,
    InvalidHandle,
    UnsupportedResourceType,
)
from org.repository.handle.resolve.resolvers import (
    ResolverTable,
    ResourceResolver,
    default_resolvers,
)
from org.repository.handle.resolve.store import HandleStore

if TYPE_CHECKING:
    from org.repository.handle.app.config import Settings

logger = logging.getLogger(__name__)

HANDLE_SCHEME = "hdl:"


def canonical_form(handle: str) -> str:
    """Transform a handle into its canonical form ``hdl:<handle>``.

    No attempt is made to verify that the handle is valid.
    """
    return HANDLE_SCHEME + handle


def with_trailing_slash(value: str) -> str:
    return value if value.endswith("/") else value + "/"


def compose_handle(prefix: str, suffix: int) -> str:
    """Join the site prefix and a numeric suffix with exactly one slash."""
    return f"{with_trailing_slash(prefix)}{suffix}"


class HandleRegistry:
    """Maps handles to repository objects and mints new handles.

    Args:
        settings: Supplies ``handle_prefix`` for minting
        resolvers: Resource kind dispatch table, defaults to items only
        store: Record store, defaults to the SQLAlchemy store
        metrics: Metrics sink, defaults to a no-op client
    """

    def __init__(
        self,
        settings: "Settings",
        resolvers: Optional[ResolverTable] = None,
        store: Optional[HandleStore] = None,
        metrics: Optional[MetricsClient] = None,
    ) -> None:
        self.settings = settings
        self.resolvers = (
            resolvers if resolvers is not None else default_resolvers(settings)
        )
        self.store = store if store is not None else HandleStore()
        self.metrics = metrics if metrics is not None else NoOpMetricsClient()

    async def resolve_to_url(
        self, database_session: AsyncSession, handle: str
    ) -> Optional[str]:
        """Return the dissemination URL for a handle.

        Args:
            database_session: Caller's database session
            handle: The handle to resolve

        Returns:
            The URL, or None if the handle is not registered

        Raises:
            InvalidHandle: The handle is null or empty
            CorruptRecord: The record has no resource type or resource id
            UnsupportedResourceType: No resolver is registered for the record's type
            ConfigurationMissing: The resolver's URL prefix is not configured
        """
        record = await self._find_record(database_session, handle)
        if record is None:
            return None

        resolver = self._resolver_for(record)
        if not resolver.url_prefix:
            raise ConfigurationMissing.setting(resolver.url_prefix_setting)

        url = with_trailing_slash(resolver.url_prefix) + handle
        logger.debug("Resolved %s to %s", handle, url)
        return url

    async def resolve_to_object(
        self, database_session: AsyncSession, handle: str
    ) -> Optional[Any]:
        """Return the repository object a handle maps to.

        A handle whose object has since been removed resolves to None, the
        same as a handle that was never minted.

        Raises:
            InvalidHandle: The handle is null or empty
            CorruptRecord: The record has no resource type or resource id
            UnsupportedResourceType: No resolver is registered for the record's type
        """
        record = await self._find_record(database_session, handle)
        if record is None:
            return None

        resolver = self._resolver_for(record)
        resource = await resolver.find(database_session, record.resource_id)

        if resource is None:
            self.metrics.increment(
                "handle.registry.dangling",
                1,
                tag_dict={"resource_type": resolver.resource_type.name},
            )
        logger.debug(
            "Resolved handle %s to %s %s",
            handle,
            resolver.resource_type.name,
            record.resource_id if resource is not None else -1,
        )
        return resource

    async def find_handle(
        self, database_session: AsyncSession, resource: Any
    ) -> Optional[str]:
        """Return the handle for a repository object, or None if it has none.

        Objects of a kind without a registered resolver have no handle.
        """
        resolver, resource_id = self._identify(resource)
        if resolver is None or resource_id is None:
            return None
        return await self.store.find_by_resource(
            database_session, resolver.resource_type, resource_id
        )

    async def create_handle(
        self, database_session: AsyncSession, resource: Any
    ) -> str:
        """Mint and store a new handle for a repository object.

        The suffix is drawn from the store's sequence, so concurrent callers
        always receive distinct handles.

        Raises:
            ConfigurationMissing: ``handle.prefix`` is not configured
            UnsupportedResourceType: The object is of an unsupported kind
        """
        prefix = self.settings.handle_prefix
        if not prefix:
            raise ConfigurationMissing.setting("handle.prefix")

        resolver, resource_id = self._identify(resource)
        if resolver is None or resource_id is None:
            raise UnsupportedResourceType.for_resource(resource)

        handle_id = await self.store.allocate_id(database_session)
        handle = compose_handle(prefix, handle_id)
        await self.store.insert(
            database_session, handle_id, handle, resolver.resource_type, resource_id
        )

        self.metrics.increment(
            "handle.registry.mint",
            1,
            tag_dict={"resource_type": resolver.resource_type.name},
        )
        logger.debug("Created new handle %s", handle)
        return handle

    @staticmethod
    def get_canonical_form(handle: str) -> str:
        return canonical_form(handle)

    async def get_handles_for_prefix(
        self, database_session: AsyncSession, prefix: str
    ) -> List[str]:
        """Return all handles starting with ``prefix``, matched literally."""
        if prefix is None:
            raise InvalidHandle.missing_prefix()
        return await self.store.find_by_prefix(database_session, prefix)

    async def _find_record(
        self, database_session: AsyncSession, handle: str
    ) -> Optional[HandleRecord]:
        if not handle:
            raise InvalidHandle.missing()

        record = await self.store.find_by_handle(database_session, handle)
        self.metrics.increment(
            "handle.registry.resolve",
            1,
            tag_dict={"outcome": "found" if record is not None else "not_found"},
        )
        return record

    def _resolver_for(self, record: HandleRecord) -> ResourceResolver:
        if record.resource_type_id is None or record.resource_id is None:
            raise CorruptRecord.missing_resource(record.handle)

        resolver = self.resolvers.get(record.resource_type_id)
        if resolver is None:
            raise UnsupportedResourceType.for_type(record.resource_type_id)
        return resolver

    def _identify(
        self, resource: Any
    ) -> Tuple[Optional[ResourceResolver], Optional[int]]:
        for resolver in self.resolvers.values():
            resource_id = resolver.identify(resource)
            if resource_id is not None:
                return resolver, resource_id
        return None, None
