# file: scopekit/exceptions.py
"""
Defines the custom exception hierarchy for scopekit.
"""
from typing import Any, Optional


def type_name(service_type: Any) -> str:
    """Readable name for a service type, used in error messages."""
    module = getattr(service_type, "__module__", None)
    qualname = getattr(service_type, "__qualname__", None)
    if qualname is None:
        return repr(service_type)
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


class ScopeKitError(Exception):
    """Base exception for all scopekit errors."""
    pass

# --- Configuration Errors ---
class ConfigurationError(ScopeKitError):
    """Error related to loading, parsing, or saving configuration files."""
    pass

# --- Registry Errors ---
class ServiceNotFoundError(ScopeKitError, KeyError):
    """Raised by an eager get() when no scope in the chain holds the service."""

    def __init__(self, service_type: Any, scope_name: Optional[str] = None):
        self.service_type = service_type
        self.scope_name = scope_name
        where = f" (resolved from '{scope_name}')" if scope_name else ""
        self.message = f"Service of type {type_name(service_type)} not registered{where}."
        super().__init__(self.message)

    def __str__(self):
        # KeyError would otherwise quote the message
        return self.message


class DuplicateServiceRegistrationError(ScopeKitError):
    """A second instance was offered for a type the registry already holds."""

    def __init__(self, service_type: Any):
        self.service_type = service_type
        super().__init__(f"Service of type {type_name(service_type)} already registered.")


class ServiceTypeMismatchError(ScopeKitError):
    """The instance does not implement the type it is registered under."""
    pass

# --- Scope Errors ---
class DuplicateScopeConfigurationError(ScopeKitError):
    """A second scope tried to claim the global identity or an already bound scene."""
    pass

# --- Lifecycle Errors ---
class CapabilityMismatchError(ScopeKitError):
    """An instance registered for a lifecycle phase lacks that phase's callback."""
    pass

# --- Injection Errors ---
class InjectionError(ScopeKitError):
    """A tagged member could not be resolved from its scope."""

    def __init__(self, message: str, target: Any = None, member: Any = None,
                 service_type: Any = None, scope: Any = None):
        super().__init__(message)
        self.target = target
        self.member = member
        self.service_type = service_type
        self.scope = scope


class NoSetterError(InjectionError):
    """A tagged property has no setter, so it can never be injected."""
    pass


class NullTargetError(ScopeKitError, ValueError):
    """Injection was requested on None."""
    pass
