"""vaultsync — materialize a virtual content tree onto the filesystem."""

__version__ = "0.1.0"
