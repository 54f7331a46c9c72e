"""
Persistence layer — async SQLAlchemy engine and models.
"""
