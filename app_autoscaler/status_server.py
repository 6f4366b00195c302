import logging
import threading

from flask import Flask, jsonify
from werkzeug.serving import make_server

from app_autoscaler.errors import ConfigurationError
from app_autoscaler.state.status import ScalingState

BIND_HOST = '0.0.0.0'


def create_app(scaling_state: ScalingState) -> Flask:
    """Build the read-only status application."""
    app = Flask(__name__)

    @app.route('/', methods=['GET'])
    def status():
        return jsonify(scaling_state.snapshot().to_dict())

    return app


class StatusServer:
    """
    Serves the scaling state over HTTP from a background daemon thread.
    """

    def __init__(self, scaling_state: ScalingState, port: int, host: str = BIND_HOST):
        self._app = create_app(scaling_state)
        self._host = host
        self._port = port
        self._server = None
        self._thread = None

    @property
    def port(self) -> int:
        return self._server.server_port if self._server else self._port

    def start(self):
        """
        Bind the listening socket and start serving.

        Raises:
            ConfigurationError: If the port cannot be bound
        """
        logging.info(f"Starting web server on {self._host}:{self._port}")
        try:
            self._server = make_server(self._host, self._port, self._app, threaded=True)
        except (OSError, SystemExit) as e:
            # werkzeug exits instead of raising when the port is taken
            raise ConfigurationError(f"Error starting status web server on port {self._port}: {e}") from e

        self._thread = threading.Thread(target=self._server.serve_forever, name='status-server', daemon=True)
        self._thread.start()
