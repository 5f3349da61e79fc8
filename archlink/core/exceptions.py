"""
Exceptions for archlink.

This module contains the exception hierarchy for archlink operations.
"""


class ArchlinkError(Exception):
    """Base exception for archlink operations."""
    pass


class InvalidQueryError(ArchlinkError):
    """Raised when a search query is empty or whitespace-only."""
    pass


class InvalidConfigurationError(ArchlinkError):
    """Raised when the ranking engine receives a non-positive result limit."""
    pass


class ConfigurationError(ArchlinkError):
    """Raised when a configuration file cannot be loaded."""
    pass


class FetchError(ArchlinkError):
    """Raised when a package catalog cannot be fetched."""
    pass


class InstallError(ArchlinkError):
    """Raised when a package could not be installed with any available tool."""
    pass
