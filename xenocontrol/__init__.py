"""Controller data, device matching, drift sampling, settings and button mappings."""

__version__ = "0.12.16"