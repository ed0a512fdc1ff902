"""
Handle Registry - persistent identifiers for repository content

This package maps handles, opaque persistent identifiers of the form "<prefix>/<suffix>",
to the repository objects they name. It mints new handles when objects are registered,
resolves handles back to objects or to dissemination URLs, and enumerates handles by prefix.

Key Components:
- app: Web application layer, configuration and metrics
- model: Database models for handle records and items
- resolve: The handle registry service, its record store and resolver table

Guarantees:
- A handle is unique and never changes once minted
- Concurrent minting never hands out the same handle twice
- Each handle record carries both a resource type and a resource id

Resolution of unknown handles is not an error: lookups return None.
"""
