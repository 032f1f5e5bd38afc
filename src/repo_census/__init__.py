"""repo-census: GitHub organization repository inventory reports."""

__version__ = "0.1.0"
