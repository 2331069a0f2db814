"""Hospital personnel management: job groups, titles, staff records, rate limiting and polyclinic lookups."""

__version__ = "0.1.0"