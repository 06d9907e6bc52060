# Data-access layer
"""
Generic async CRUD over SQLAlchemy models. See `base.Repository`.
"""
