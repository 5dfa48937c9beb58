"""devsetup — plan and run developer environment setup."""

__version__ = "0.1.0"
