"""
Repository layer for data access.

Repositories build SQLAlchemy Core statements against the engines owned by
src.db.session.DatabaseManager and translate store failures into RepositoryError.
"""
