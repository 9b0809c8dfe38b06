"""Generate TypeScript API clients backed by IndexedDB mocks from OpenAPI documents."""

__version__ = "0.2.0"
