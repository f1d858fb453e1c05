# drizzle_gen/__init__.py
"""Drizzle ORM schema generator, reader and change gate."""

__version__ = "0.1.0"
