"""Turn product requirements into a machine-consumable semantic blueprint."""

__version__ = "0.1.0"
