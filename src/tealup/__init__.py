"""tealup - provisioning and lifecycle management for the TEAL language server.

Downloads, upgrades and launches ``tealsp`` from a remote release channel.
"""

__version__ = "0.4.2"
