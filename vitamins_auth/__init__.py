"""Authentication and password-reset flow for the Vitamins client."""

__version__ = "0.1.0"
