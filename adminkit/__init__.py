"""Building blocks for an admin backend: settings, DTOs, middleware helpers, permissions, schema metadata and server monitoring."""

__version__ = "2.1.2"