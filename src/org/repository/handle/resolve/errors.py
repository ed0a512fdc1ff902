"""Failures raised by the handle registry.

"Not found" is never an error: lookups return None instead. Everything below
is a distinct failure that callers can branch on by type.
"""

from typing import Any


class HandleException(Exception):
    """Base class for handle registry failures."""


class InvalidHandle(HandleException, ValueError):
    """A null or empty handle was passed to a lookup."""

    @staticmethod
    def missing() -> "InvalidHandle":
        return InvalidHandle("error-handle-1000 Handle is null or empty")

    @staticmethod
    def missing_prefix() -> "InvalidHandle":
        return InvalidHandle("error-handle-1004 Handle prefix is null")


class UnsupportedResourceType(HandleException):
    """The record or resource is of a kind no resolver is registered for."""

    @staticmethod
    def for_type(resource_type_id: int) -> "UnsupportedResourceType":
        return UnsupportedResourceType(
            f"error-handle-1001 Unsupported resource type {resource_type_id}"
        )

    @staticmethod
    def for_resource(resource: Any) -> "UnsupportedResourceType":
        return UnsupportedResourceType(
            f"error-handle-1001 Unsupported resource {type(resource).__name__}"
        )


class CorruptRecord(HandleException):
    """A stored record is missing its resource type or resource id."""

    @staticmethod
    def missing_resource(handle: str) -> "CorruptRecord":
        return CorruptRecord(
            f"error-handle-1002 No associated resource type or id for {handle}"
        )


class ConfigurationMissing(HandleException):
    """A required configuration property is not set."""

    @staticmethod
    def setting(name: str) -> "ConfigurationMissing":
        return ConfigurationMissing(
            f"error-handle-1003 Configuration property {name} is not set"
        )
