"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from qt_lazy_linter.infrastructure.di.container import QtLazyContainer
from qt_lazy_linter.interface.cli import CLIDependencies, create_app


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = QtLazyContainer()

    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        registry=container.get_registry(),
        text_reporter=container.get_reporter("text"),
        json_reporter=container.get_reporter("json"),
        run_checks_factory=container.build_run_checks,
    )

    app = create_app(deps)
    app()


if __name__ == "__main__":
    main()
