"""Credential, token and request-validation core of the Project Camp backend."""

__version__ = "0.1.0"
