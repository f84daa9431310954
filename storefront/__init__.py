"""Storefront client.

Browses a paginated product catalog with category and price facets,
keeps a durable cart, and exposes an admin surface for catalog edits.

This package provides:
- Catalog browsing state machine with stale-response protection
- Append-only cart mirrored to key-value storage
- Async HTTP client for the product API
- Admin gate and single-product CRUD
- Mock product API for local development and tests
"""

__version__ = "1.0.0"
