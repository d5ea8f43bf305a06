"""Active-object event framework and simulated controller for a hydroponic tower."""

__version__ = "0.1.0"