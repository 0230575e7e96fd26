"""Development server for Rookblog.

Renders every page on request so edits to posts show up immediately:
- Routes ``/``, ``/posts/<slug>``, ``/rss.xml``, ``/sitemap.xml`` and ``/robots.txt``
  to freshly parsed posts; everything else is served from the public directory.
- Answers unknown posts and missing files with the 404 page.
- Injects a reload script into HTML responses and tells open pages to reload
  whenever content, templates, public files or the configuration change.

Key classes:
- DevServer: Main class for running the development server.
- Response: A rendered response (status, content type, body).
- _BlogHandler: HTTP request handler dispatching to DevServer.
- _ChangeHandler: File system event handler for triggering reloads.
"""

from __future__ import annotations

import asyncio
import functools
import json
import threading
import time
from dataclasses import dataclass
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import parse_qs, unquote, urlsplit

import websockets
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .build import CONFIG_FILENAME, load_config, resolve_dir
from .content import PostRepository
from .feeds import FEED_CACHE_CONTROL, create_default_feed_registry
from .templates import TemplateEngine
from .validators import ValidationError

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
NO_CACHE = "no-cache, no-store, must-revalidate"


@dataclass
class Response:
    """A rendered dynamic response.

    Attributes:
        status: HTTP status code.
        content_type: Value of the Content-Type header.
        body: Response text.
        cache_control: Value of the Cache-Control header.
    """

    status: int
    content_type: str
    body: str
    cache_control: str = NO_CACHE


def _first(params: dict[str, list[str]], key: str) -> str:
    values = params.get(key)
    return values[0] if values else ""


class _BlogHandler(SimpleHTTPRequestHandler):
    """HTTP request handler that renders blog routes and injects live reload.

    Attributes:
        blog: DevServer answering dynamic routes.
        reload_script: JavaScript code for WebSocket connection to trigger reloads.
    """

    reload_script_template = """
    <script>
    (() => {{
      const ws = new WebSocket('ws://' + location.hostname + ':{ws_port}');
      ws.onmessage = (event) => {{
        const data = JSON.parse(event.data || '{{}}');
        if (data.type === 'reload') location.reload();
      }};
    }})();
    </script>
    """
    reload_script = reload_script_template.format(ws_port=3001)
    blog: DevServer | None = None

    def list_directory(self, path):  # pragma: no cover - exercised via send_head
        # Never expose directory listings; treat as missing content.
        return self._send(self.blog.not_found())

    def send_head(self):
        parts = urlsplit(self.path)
        try:
            response = self.blog.respond(unquote(parts.path), parse_qs(parts.query))
        except ValidationError as exc:
            print(f"Invalid post: {exc.message}")
            response = Response(500, "text/plain; charset=utf-8", exc.message)
        if response is not None:
            return self._send(response)

        path = Path(self.translate_path(self.path))
        if not path.is_file():
            return self._send(self.blog.not_found())
        return super().send_head()

    def _send(self, response: Response):
        body = response.body
        if response.content_type == HTML_CONTENT_TYPE:
            if "</body>" in body:
                body = body.replace("</body>", f"{self.reload_script}</body>")
            else:
                body += self.reload_script
        encoded = body.encode("utf-8")
        self.send_response(response.status)
        self.send_header("Content-type", response.content_type)
        self.send_header("Content-Length", str(len(encoded)))
        self.send_header("Cache-Control", response.cache_control)
        self.end_headers()
        self.wfile.write(encoded)
        return None


class DevServer:
    """Development server with per-request rendering and live reload.

    Attributes:
        project_root: Root directory of the project.
        config: Site configuration.
        content_dir: Directory holding post sources.
        public_dir: Directory served for static files.
        http_port: Port for HTTP server.
        ws_port: Port for WebSocket connections.
        _observer: File system observer for changes.
        _ws_clients: Set of connected WebSocket clients.
        _loop: Event loop for WebSocket handling.
    """

    def __init__(
        self,
        project_root: Path,
        http_port: int | None = None,
        ws_port: int | None = None,
    ):
        """Initialize the development server.

        Args:
            project_root: Root directory of the project.
            http_port: Optional override for HTTP port.
            ws_port: Optional override for the live reload WebSocket port.
        """
        self.project_root = project_root
        self.config = load_config(project_root)
        self.content_dir = resolve_dir(project_root, self.config, "content_dir")
        self.public_dir = resolve_dir(project_root, self.config, "public_dir")
        self.templates_dir = resolve_dir(project_root, self.config, "templates_dir")
        base_http = int(http_port or self.config.get("port", 3000))
        resolved_ws = (
            ws_port
            if ws_port is not None
            else (
                base_http + 1
                if http_port is not None
                else self.config.get("ws_port", base_http + 1)
            )
        )
        self.ws_port = int(resolved_ws)
        self.http_port = base_http
        self._reload_script = _BlogHandler.reload_script_template.format(ws_port=self.ws_port)
        self.repository = PostRepository(self.content_dir)
        self.engine = TemplateEngine(self.config, self.templates_dir)
        self.feeds = create_default_feed_registry()
        self._observer: Observer | None = None
        self._ws_clients: set = set()
        self._loop = asyncio.new_event_loop()
        self._last_reload_at = 0.0
        self._debounce_seconds = 0.1

    def respond(self, path: str, params: dict[str, list[str]]) -> Response | None:
        """Render the response for a dynamic route.

        Args:
            path: Decoded request path.
            params: Parsed query string.

        Returns:
            Response for blog routes, or None when the path should be served
            from the public directory.

        Raises:
            ValidationError: If any post is invalid.
        """
        if path in ("", "/"):
            posts = self.repository.get_all_posts()
            body = self.engine.render_home(posts, _first(params, "q"), _first(params, "tag"))
            return Response(200, HTML_CONTENT_TYPE, body)

        if path.startswith("/posts/"):
            slug = path[len("/posts/") :].strip("/")
            post = asyncio.run(self.repository.get_post_by_slug(slug)) if slug else None
            if post is None:
                return self.not_found()
            return Response(200, HTML_CONTENT_TYPE, self.engine.render_post(post))

        generator = self.feeds.get(path.lstrip("/"))
        if generator is not None:
            posts = self.repository.get_all_posts()
            return Response(
                200,
                generator.content_type,
                generator.generate(posts, self.config),
                FEED_CACHE_CONTROL,
            )
        return None

    def not_found(self) -> Response:
        return Response(404, HTML_CONTENT_TYPE, self.engine.render_not_found())

    def start(self) -> None:  # pragma: no cover - integration path
        threading.Thread(target=self._start_http, daemon=True).start()
        threading.Thread(target=self._start_ws, daemon=True).start()
        self._start_watcher()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
        self._loop.call_soon_threadsafe(self._loop.stop)

    def _start_http(self) -> None:  # pragma: no cover - integration path
        handler_cls = type(
            "_BlogHandlerWithServer",
            (_BlogHandler,),
            {"reload_script": self._reload_script, "blog": self},
        )
        handler = functools.partial(handler_cls, directory=str(self.public_dir))
        httpd = ThreadingHTTPServer(("", self.http_port), handler)
        print(f"Serving {self.content_dir} at http://localhost:{self.http_port}")
        httpd.serve_forever()

    def _start_ws(self) -> None:  # pragma: no cover - integration path
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_until_complete(self._run_ws_server())
        except OSError as exc:
            print(f"WebSocket server failed to start (port {self.ws_port}): {exc}")
            return

    async def _run_ws_server(self) -> None:  # pragma: no cover - integration path
        async with websockets.serve(self._ws_handler, "0.0.0.0", self.ws_port):
            await asyncio.Future()  # Run forever

    async def _ws_handler(self, websocket):
        self._ws_clients.add(websocket)
        try:
            await websocket.wait_closed()
        finally:
            self._ws_clients.discard(websocket)

    def _broadcast_reload(self):
        message = json.dumps({"type": "reload"})
        asyncio.run_coroutine_threadsafe(self._async_broadcast(message), self._loop)

    async def _async_broadcast(self, message: str):
        stale = set()
        for ws in self._ws_clients:
            try:
                await ws.send(message)
            except Exception:
                stale.add(ws)
        for ws in stale:
            self._ws_clients.discard(ws)

    def _watch_paths(self) -> list[tuple[Path, bool]]:
        """Return (path, recursive) pairs to watch, skipping missing folders."""
        paths = [
            (folder, True)
            for folder in (self.content_dir, self.templates_dir, self.public_dir)
            if folder.exists()
        ]
        # Root holds rookblog.yaml
        paths.append((self.project_root, False))
        return paths

    def _start_watcher(self) -> None:
        handler = _ChangeHandler(self)
        observer = Observer()
        for path, recursive in self._watch_paths():
            observer.schedule(handler, str(path), recursive=recursive)
        observer.start()
        self._observer = observer

    def reload(self, path: Path) -> None:
        """Tell connected pages to reload after a source change."""
        now = time.time()
        if (now - self._last_reload_at) < self._debounce_seconds:
            return
        self._last_reload_at = now
        if path.name == CONFIG_FILENAME:
            self.config = load_config(self.project_root)
            self.engine = TemplateEngine(self.config, self.templates_dir)
        print("Change detected; reloading...")
        self._broadcast_reload()


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, server: DevServer):
        super().__init__()
        self.server = server

    def on_any_event(self, event):
        if event.is_directory:
            return
        path = Path(event.src_path)
        if path.parent == self.server.project_root and path.name != CONFIG_FILENAME:
            return
        self.server.reload(path)
