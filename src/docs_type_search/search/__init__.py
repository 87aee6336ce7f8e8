"""
Type-signature search package.

This package provides the pure data transformations of the search stack:
- parser: signature text to type tree
- render: type tree back to signature text
- normalizer: canonical type-variable names
- scoring: similarity (ranking) and distance comparators
- chunks: @docs comment extraction
- index: append-only session index
- query: query classification and ranking
"""
