"""Uvicorn runner."""

import copy

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from aquacrm.app import App
from aquacrm.config import Config
from aquacrm.web.server import create_fastapi_app


def uvicorn_log_config(debug: bool) -> dict:
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s %(client_addr)s "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    log_config["loggers"]["uvicorn"]["level"] = "DEBUG" if debug else "INFO"
    return log_config


def run_server(app: App, config: Config) -> None:
    uvicorn.run(
        create_fastapi_app(app, config),
        host=config.host,
        port=config.port,
        log_config=uvicorn_log_config(config.debug),
        access_log=True,
    )
