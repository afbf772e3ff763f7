"""cert-manager DNS-01 webhook solver for the Regery DNS API."""

__version__ = "0.1.0"
