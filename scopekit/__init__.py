# file: scopekit/__init__.py
"""
scopekit: a hierarchical service registry with member injection.

Services are registered in Scopes attached to a host hierarchy. Lookups
walk from the nearest scope up to the scene scope and finally the global
scope. Objects declare what they need with tagged members and get it
injected, either right away or as soon as the service is registered.
"""
import os
from pathlib import Path
from typing import Optional, Union

from scopekit.bootstrap import Bootstrapper, GlobalBootstrapper, SceneBootstrapper, bootstrap_scene
from scopekit.directory import ScopeDirectory, ScopeKind, directory as _directory
from scopekit.exceptions import (
    CapabilityMismatchError,
    ConfigurationError,
    DuplicateScopeConfigurationError,
    DuplicateServiceRegistrationError,
    InjectionError,
    NoSetterError,
    NullTargetError,
    ScopeKitError,
    ServiceNotFoundError,
    ServiceTypeMismatchError,
)
from scopekit.host import Component, Node, Scene, World
from scopekit.injection import (
    Inject,
    RuntimeInjectable,
    ThrowStrategy,
    WarnStrategy,
    inject,
)
from scopekit.lifecycle import Destroyable, FixedUpdatable, LateUpdatable, TickPhase, Updatable
from scopekit.injection.event_bus import event_bus as _event_bus
from scopekit.injection.injector import injector as _injector
from scopekit.orchestrator import InjectionOrchestrator, orchestrator as _orchestrator
from scopekit.registry import ServiceRegistry
from scopekit.scope import Scope
from scopekit.utils.config_loader import ConfigLoader
from scopekit.utils.logger import setup_logging

DEFAULT_CONFIG_DIR = Path(os.getenv("APPDATA") or Path.home() / ".config" / "scopekit") / "config"


def reset(world: Optional[World] = None):
    """
    Returns every process-wide piece of state to its initial condition:
    scope bindings, registration subscriptions, sweep bookkeeping and the
    error strategy. Call it on world restart or between test scenarios.
    """
    _directory.reset(world)
    _event_bus.clear()
    _orchestrator.reset()
    _injector.set_error_strategy(None)


def set_error_strategy(strategy):
    """Swaps the process-wide injection error strategy."""
    _injector.set_error_strategy(strategy)


def configure(config_dir: Optional[Union[str, Path]] = None) -> ConfigLoader:
    """
    Loads scopekit_config.json (creating it with defaults if needed), sets up
    logging and applies the injection settings to the orchestrator.

    Args:
        config_dir: Where the config files (and the logs/ folder) live.
                    Defaults to the per-user config directory.

    Returns:
        ConfigLoader: The loaded configuration, for callers that need more of it.
    """
    config_loader = ConfigLoader(Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR)
    config_loader.load_all_configs()
    setup_logging(config_loader)
    _orchestrator.configure(config_loader)
    return config_loader


__all__ = [
    "Bootstrapper",
    "GlobalBootstrapper",
    "SceneBootstrapper",
    "bootstrap_scene",
    "ScopeDirectory",
    "ScopeKind",
    "CapabilityMismatchError",
    "ConfigurationError",
    "DuplicateScopeConfigurationError",
    "DuplicateServiceRegistrationError",
    "InjectionError",
    "NoSetterError",
    "NullTargetError",
    "ScopeKitError",
    "ServiceNotFoundError",
    "ServiceTypeMismatchError",
    "Component",
    "Node",
    "Scene",
    "World",
    "Inject",
    "RuntimeInjectable",
    "ThrowStrategy",
    "WarnStrategy",
    "inject",
    "Destroyable",
    "FixedUpdatable",
    "LateUpdatable",
    "TickPhase",
    "Updatable",
    "InjectionOrchestrator",
    "ServiceRegistry",
    "Scope",
    "ConfigLoader",
    "configure",
    "reset",
    "set_error_strategy",
]
