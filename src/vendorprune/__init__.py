"""vendorprune - find and remove unused Composer packages."""

__version__ = "0.3.0"
