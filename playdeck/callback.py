"""
Loopback callback listener.

A minimal Flask app that accepts Spotify's OAuth redirect on one route,
stores the authorization code in the token store, and hands the browser
back to the desktop shell. Served by a threaded werkzeug server for the
lifetime of the process.
"""

import logging
import threading
from typing import Optional
from urllib.parse import urlencode

from flask import Flask, Response, render_template_string, request
from werkzeug.serving import BaseWSGIServer, make_server

from playdeck.spotify.token_store import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_CALLBACK_PATH = "/callback"
MISSING_CODE_MESSAGE = "Missing 'code' parameter."

REDIRECT_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>Spotify login complete</title>
  </head>
  <body>
    <p>Login complete. Returning to the app&hellip;</p>
    <p><a href="{{ app_url }}">Continue</a> if nothing happens.</p>
    <script>
      window.location.href = {{ app_url|tojson }};
    </script>
  </body>
</html>
"""


def _plain_text(body: str, status: int) -> Response:
    return Response(body, status=status, mimetype="text/plain")


def create_callback_app(
    token_store: TokenStore,
    app_scheme: str,
    app_host: str,
    callback_path: str = DEFAULT_CALLBACK_PATH,
) -> Flask:
    """
    Build the Flask app serving the OAuth redirect.

    Args:
        token_store: Store receiving the captured code.
        app_scheme: URL scheme of the desktop shell (e.g. ``tauri``).
        app_host: Host part of the in-app URL.
        callback_path: The single route served.

    Returns:
        Flask application. Every path or method other than
        ``GET <callback_path>`` answers 404.
    """
    app = Flask(__name__)

    def oauth_callback():
        # werkzeug adds HEAD to every GET rule
        if request.method != "GET":
            return _plain_text("Not Found", 404)

        code = request.args.get("code")
        if not code:
            error = request.args.get("error")
            if error:
                logger.warning("Spotify redirected with error: %s", error)
            else:
                logger.warning("Callback received without a code")
            return _plain_text(MISSING_CODE_MESSAGE, 400)

        token_store.set_pending_code(code)
        logger.info("Authorization code captured (%s...)", code[:6])

        app_url = f"{app_scheme}://{app_host}{callback_path}?{urlencode({'code': code})}"
        return render_template_string(REDIRECT_PAGE, app_url=app_url)

    app.add_url_rule(
        callback_path,
        endpoint="oauth_callback",
        view_func=oauth_callback,
        methods=["GET"],
        provide_automatic_options=False,
    )

    @app.errorhandler(404)
    @app.errorhandler(405)
    def not_found(error):
        return _plain_text("Not Found", 404)

    return app


class CallbackServer:
    """
    Runs the callback app on a fixed loopback address in a daemon thread.

    Started once; overlapping requests are each handled on their own
    thread. The listener never stops itself; ``shutdown`` is for process
    teardown.
    """

    def __init__(self, app: Flask, host: str, port: int):
        self._app = app
        self._host = host
        self._port = port
        self._server: Optional[BaseWSGIServer] = None
        self._thread: Optional[threading.Thread] = None
        self._start_lock = threading.Lock()

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        """The bound port (resolved after start when configured as 0)."""
        if self._server is not None:
            return self._server.port
        return self._port

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """
        Bind the socket and start serving.

        Raises:
            RuntimeError: If the server was already started.
            OSError: If the address is unavailable.
        """
        with self._start_lock:
            if self._server is not None:
                raise RuntimeError("Callback server already started")

            self._server = make_server(self._host, self._port, self._app, threaded=True)
            self._thread = threading.Thread(
                target=self._server.serve_forever,
                name="playdeck-callback",
                daemon=True,
            )
            self._thread.start()

        logger.info("Callback listener on http://%s:%d", self._host, self.port)

    def shutdown(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5)
        logger.info("Callback listener stopped")
