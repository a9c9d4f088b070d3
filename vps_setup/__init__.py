"""
VPS setup toolkit.

This package provides an interactive installer and configurator for freshly
provisioned virtual servers: it detects the operating system, reports the
state of common server components and dispatches their handler scripts.
"""

__version__ = "1.0.0"
