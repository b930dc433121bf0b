"""fsscan — read-only filesystem scanner with sizes, permissions and search."""

__version__ = "0.1.0"


class FssError(Exception):
    """User-facing CLI error.

    Raised for invalid arguments, inaccessible scan roots, and other
    fatal input errors. The message is printed to stderr and the
    process exits with code 1.
    """


class ConfigError(FssError):
    """Invalid option combination or malformed option value.

    Raised before any traversal starts.
    """


class RootAccessError(FssError):
    """The scan root does not exist, is not a directory, or cannot be listed."""
