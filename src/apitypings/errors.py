"""Domain-specific errors for apitypings."""

from __future__ import annotations


class ApiTypingsError(Exception):
    """Base error for apitypings."""


class ScopeLoadError(ApiTypingsError):
    """Raised when a front-end dump cannot be read or does not describe one package."""


class TypeExprError(ApiTypingsError):
    """Raised when Go type text from the front end cannot be parsed."""


class TagSyntaxError(ApiTypingsError):
    """Raised when a struct field carries a malformed tag."""


class UnsupportedTypeError(ApiTypingsError):
    """Raised when the type mapper has no rule for a Go type."""


class UnsupportedDeclarationError(ApiTypingsError):
    """Raised when a named declaration has an underlying shape the classifier does not know."""


class GenericParamError(ApiTypingsError):
    """Raised when a declared type parameter is never bound by any field."""


class ConfigError(ApiTypingsError):
    """Raised when a run configuration file is invalid."""
