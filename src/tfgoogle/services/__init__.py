"""
Service packages. Importing this package registers every data source.
"""

from . import compute  # noqa: F401
