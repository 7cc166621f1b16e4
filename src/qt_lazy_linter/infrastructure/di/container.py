from typing import TYPE_CHECKING, Any, Optional, cast

from qt_lazy_linter.domain.config import ConfigurationLoader
from qt_lazy_linter.domain.registry import CheckRegistry
from qt_lazy_linter.infrastructure.config_file_loader import ConfigFileLoader
from qt_lazy_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from qt_lazy_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from qt_lazy_linter.infrastructure.gateways.fixer_gateway import EditFixerGateway
from qt_lazy_linter.infrastructure.gateways.source_gateway import TokenSourceManager
from qt_lazy_linter.interface.reporters import JsonReporter, TextReporter
from qt_lazy_linter.use_cases.checks import default_registry
from qt_lazy_linter.use_cases.run_checks import RunChecksUseCase

if TYPE_CHECKING:
    from qt_lazy_linter.domain.config import RunConfiguration
    from qt_lazy_linter.domain.protocols import (
        FileSystemProtocol,
        FixerGatewayProtocol,
        FrontEndProtocol,
        TypeResolverProtocol,
    )
    from qt_lazy_linter.interface.reporters import RunReporter


class QtLazyContainer:
    """Dependency Injection Container for the Qt lazy linter."""

    _instance: Optional["QtLazyContainer"] = None

    def __init__(self, config: Optional[dict[str, object]] = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config)

    def _register_defaults(self, config: Optional[dict[str, object]]) -> None:
        """Register default implementations for protocols."""
        if config is None:
            config = ConfigFileLoader.load_config_from_fs()
        config_loader = ConfigurationLoader(config)
        self.register_singleton("ConfigurationLoader", config_loader)

        self.register_singleton("AstroidGateway", AstroidGateway())
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("EditFixerGateway", EditFixerGateway(config_loader.python_version))
        self.register_singleton("CheckRegistry", default_registry())

        # Interface
        self.register_singleton("TextReporter", TextReporter())
        self.register_singleton("JsonReporter", JsonReporter())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        """Return the configuration loader (created at composition root)."""
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_astroid_gateway(self) -> "FrontEndProtocol":
        """Return the astroid front end."""
        return cast("FrontEndProtocol", self.get("AstroidGateway"))

    def get_type_resolver(self) -> "TypeResolverProtocol":
        """The astroid gateway doubles as type resolver."""
        return cast("TypeResolverProtocol", self.get("AstroidGateway"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_fixer_gateway(self) -> "FixerGatewayProtocol":
        """Return the LibCST validated fixer gateway."""
        return cast("FixerGatewayProtocol", self.get("EditFixerGateway"))

    def get_registry(self) -> CheckRegistry:
        return cast(CheckRegistry, self.get("CheckRegistry"))

    def get_reporter(self, output_format: str = "text") -> "RunReporter":
        key = "JsonReporter" if output_format == "json" else "TextReporter"
        return cast("RunReporter", self.get(key))

    def build_run_checks(self, config: "RunConfiguration") -> RunChecksUseCase:
        """A RunChecksUseCase wired with the registered gateways."""
        return RunChecksUseCase(
            front_end=self.get_astroid_gateway(),
            type_resolver=self.get_type_resolver(),
            fixer_gateway=self.get_fixer_gateway(),
            filesystem=self.get_filesystem_gateway(),
            registry=self.get_registry(),
            config=config,
            source_manager_factory=TokenSourceManager,
        )

    @classmethod
    def get_instance(cls) -> "QtLazyContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = QtLazyContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
