from typing import List
import argparse
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from org.repository.handle.app.config import Settings
from org.repository.handle.resolve.errors import HandleException
from org.repository.handle.resolve.registry import HandleRegistry, canonical_form

logger = logging.getLogger(__name__)


async def resolveHandles(registry: HandleRegistry, pg_dsn: str, handles: List[str]) -> None:
    engine = create_async_engine(pg_dsn)
    database_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    try:
        async with database_session_maker() as database_session:
            for handle in handles:
                try:
                    url = await registry.resolve_to_url(database_session, handle)
                    print(f"{canonical_form(handle)} {url}")
                except HandleException:
                    logging.exception("Exception resolving handle %s", handle)
    finally:
        await engine.dispose()


async def listHandles(registry: HandleRegistry, pg_dsn: str, prefix: str) -> None:
    engine = create_async_engine(pg_dsn)
    database_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    try:
        async with database_session_maker() as database_session:
            for handle in await registry.get_handles_for_prefix(
                database_session, prefix
            ):
                print(handle)
    finally:
        await engine.dispose()


async def realMain() -> None:
    parser = argparse.ArgumentParser(prog="handle-util", description="Handle utilities")

    subparsers = parser.add_subparsers(dest="command", required=True)

    canonical = subparsers.add_parser(
        "canonical", help="Print the canonical form of handles"
    )
    canonical.add_argument("handle", nargs="+", help="The handle(s) to transform.")

    resolve = subparsers.add_parser("resolve", help="Resolve handles to URLs")
    resolve.add_argument("handle", nargs="+", help="The handle(s) to resolve.")

    list_prefix = subparsers.add_parser("list", help="List handles under a prefix")
    list_prefix.add_argument("prefix", help="The handle prefix to list.")

    args = vars(parser.parse_args())
    command = args.get("command", None)

    if command == "canonical":
        for handle in args.get("handle", []):
            print(canonical_form(handle))
        return

    settings = Settings()  # type: ignore
    registry = HandleRegistry(settings)

    if command == "resolve":
        await resolveHandles(registry, str(settings.pg_dsn), args.get("handle", []))
    elif command == "list":
        await listHandles(registry, str(settings.pg_dsn), args.get("prefix", ""))


def main() -> None:
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
