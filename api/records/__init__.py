"""
Record resource: CRUD over the `records` table.
"""
