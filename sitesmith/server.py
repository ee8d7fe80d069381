"""Preview server for sitesmith.

Serves the output directory as static files while the watch loop rebuilds
it. The server never writes to the output tree and knows nothing about
rebuilds; a request made mid-build may see the previous version of a page.

Key classes:
- PreviewServer: Threaded static file server for the output directory.
- _StaticHandler: Request handler that logs through the logging module.
"""

from __future__ import annotations

import functools
import logging
import threading
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080


class _StaticHandler(SimpleHTTPRequestHandler):
    """Read-only handler: only GET and HEAD are implemented."""

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class PreviewServer:
    """Static HTTP server for the built site.

    Attributes:
        output_dir: Directory being served.
        host: Interface to bind; empty means all interfaces.
        port: Port to bind; 0 picks a free port.
    """

    def __init__(self, output_dir: Path, port: int = DEFAULT_PORT, host: str = ""):
        self.output_dir = output_dir
        self.host = host
        self.port = port
        self._httpd: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None
        self._serving = threading.Event()

    @property
    def serving(self) -> bool:
        """True while a serve loop is running or about to run."""
        return self._serving.is_set()

    @property
    def url(self) -> str:
        port = self._httpd.server_address[1] if self._httpd else self.port
        return f"http://localhost:{port}"

    def _bind(self) -> ThreadingHTTPServer:
        if self._httpd is None:
            handler = functools.partial(_StaticHandler, directory=str(self.output_dir))
            self._httpd = ThreadingHTTPServer((self.host, self.port), handler)
            self._httpd.daemon_threads = True
        return self._httpd

    def serve_forever(self) -> None:
        """Serve requests on the calling thread until shutdown()."""
        httpd = self._bind()
        self._serving.set()
        logger.info("Serving %s at %s", self.output_dir, self.url)
        try:
            httpd.serve_forever()
        finally:
            self._serving.clear()
            httpd.server_close()

    def start(self) -> threading.Thread:
        """Bind the port and serve on a daemon thread.

        Binding happens on the calling thread so port errors surface here.
        """
        self._bind()
        # Set before the thread runs so an immediate shutdown() still stops it.
        self._serving.set()
        self._thread = threading.Thread(
            target=self.serve_forever, name="sitesmith-preview", daemon=True
        )
        self._thread.start()
        return self._thread

    def shutdown(self) -> None:
        """Stop the serve loop, whichever thread runs it, and release the port."""
        httpd = self._httpd
        if httpd is None:
            return
        if self._serving.is_set():
            # serve_forever() closes the socket on its way out.
            httpd.shutdown()
        else:
            httpd.server_close()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self._httpd = None
