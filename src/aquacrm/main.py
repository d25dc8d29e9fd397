"""Application entry point for the AquaCRM backend server."""

from aquacrm.app import App
from aquacrm.config import Config
from aquacrm.logging import setup_logging
from aquacrm.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
