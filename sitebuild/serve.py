"""Simple development server for the assembled site.

Serves the project root so the rewritten `build/assets/...` URLs in
`build/index.html` resolve, and redirects `/` to the built page.
"""

from functools import partial
from http.server import HTTPServer, SimpleHTTPRequestHandler

from sitebuild.assemble import run_build


class SiteHandler(SimpleHTTPRequestHandler):
    """Serves the project root with `/` mapped to the build's index.html."""

    def __init__(self, *args, index_path='/build/index.html', **kwargs):
        self.index_path = index_path
        super().__init__(*args, **kwargs)

    def do_GET(self):
        if self.path in ('', '/'):
            self.send_response(302)
            self.send_header('Location', self.index_path)
            self.end_headers()
            return
        super().do_GET()

    def end_headers(self):
        # CORS and caching headers for development
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Cache-Control', 'no-cache')
        super().end_headers()


def served_directory(config):
    """Return (directory, index URL path) the dev server uses for config.

    The project root is served so rewritten `build/assets/...` URLs
    resolve; a build directory outside the root is served on its own.
    """
    try:
        build_rel = config.build_path.relative_to(config.root).as_posix()
    except ValueError:
        return config.build_path, '/index.html'
    return config.root, f'/{build_rel}/index.html'


def make_server(config, port=8080, host='localhost'):
    """Create (but do not start) an HTTPServer for config's site."""
    directory, index_path = served_directory(config)
    handler = partial(SiteHandler, directory=str(directory),
                      index_path=index_path)
    return HTTPServer((host, port), handler)


def serve(config, port=8080):
    """Serve the site, building it first if index.html is missing.

    Raises
    ------
    StrictBuildError
        If the automatic build fails in strict mode.
    """
    if not (config.build_path / 'index.html').exists():
        print('No build found, running build first...')
        run_build(config)

    server = make_server(config, port)
    directory, index_path = served_directory(config)
    port = server.server_address[1]
    print(f'Serving {directory} at http://localhost:{port}{index_path}')
    print('Press Ctrl+C to stop.')

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print('\nStopped.')
    finally:
        server.server_close()
