"""Application entry point for the Mflix API server."""

from mflix.app import App
from mflix.config import Config
from mflix.logging import setup_logging
from mflix.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
