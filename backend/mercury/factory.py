"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from mercury.core.config import BaseConfig, get_config
from mercury.core.logger import configure_logging, init_app as init_logging
from mercury.services._shared.ports import Clock


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    clock: Clock | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    Parameters
    ----------
    config:
        Configuration object (or import path) to load; defaults to the class
        selected by ``APP_ENV``.
    clock:
        Time source handed to the authentication service; tests inject a
        frozen clock here.
    instance_relative_config:
        Whether to look for an instance folder config file.
    instance_config_filename:
        File inside the instance folder loaded on top of ``config``.

    Raises
    ------
    mercury.services._shared.errors.ConfigurationError
        If the authentication settings are invalid.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from mercury.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from mercury.core import security

    security.init_app(app, clock=clock)

    from mercury.api import init_app as init_api

    init_api(app)

    from mercury.core import errors

    errors.init_app(app)

    from mercury import cli as mercury_cli

    mercury_cli.init_app(app)

    return app
