"""
Handle Resolution and Registration

This package implements the handle registry: resolving handles to dissemination URLs and
repository objects, reverse lookup from objects to handles, minting new handles, and
enumerating handles by prefix.

Key Components:
- registry.py: HandleRegistry service and canonical form helpers
- resolvers.py: Resource kind dispatch table
- store.py: SQLAlchemy-backed handle record store
- errors.py: Named failures raised by the registry
- __main__.py: CLI interface for resolution

Resolution flow:
1. Look up the handle record by its unique key
2. Reject records missing their resource type or id
3. Dispatch on the resource type to the registered resolver
4. Build the dissemination URL, or load the object through the resolver

Minting flow:
1. Read the site prefix from settings
2. Allocate a suffix from the handle sequence
3. Insert the record and return "<prefix>/<suffix>"
"""
