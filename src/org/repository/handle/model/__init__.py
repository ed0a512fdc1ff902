"""
Database Models

This package defines the database models for the handle registry using SQLAlchemy ORM.

Key Models:
- base.py: Base SQLAlchemy model with common type definitions
- resource_types.py: Resource type tags shared by records and resolvers
- handles.py: Identifier records and the statements used to query and mint them
- items.py: The item resource kind addressed by minted identifiers

Each identifier record maps one handle string to a (resource type, resource id) pair.
Records are immutable once inserted; there is no update or delete path.

The models use SQLAlchemy's async interface for non-blocking database operations.
"""
