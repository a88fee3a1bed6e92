"""Price alert history archiving.

Building blocks for the periodic extract, archive, purge job:

- persistence: persistence boundary (interfaces + error types)
- storage: concrete stores (MongoDB, in-memory)
- export: CSV archive writer
- retention: the purge job that ties them together
"""
