"""Data Display Core - schema-driven relational data rendering.

This package turns schema fields and raw relational rows into a flat,
renderable presentation model:
- Value formatting (field + value -> RenderSpec)
- Option normalization (ids, stubs, option objects -> badges)
- Filter strategies (operators per field component)
- Column building and nested/flattened table layout
"""

__version__ = "0.1.0"
