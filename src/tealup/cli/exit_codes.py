"""Exit codes for the tealup CLI."""

EXIT_SUCCESS = 0
EXIT_UPGRADE_AVAILABLE = 1
EXIT_INSTALL_FAILURE = 2
EXIT_INVALID_USAGE = 3
EXIT_BOOTSTRAP_FAILURE = 4
