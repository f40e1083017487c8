"""Shared fixtures for sitebuild tests."""

import pytest

from sitebuild.config import BuildConfig


TEMPLATE = """<html>
<body>
<!-- HEADER -->
<main>
<!-- ABOUT -->
</main>
<img src="core/assets/images/logo.png">
</body>
</html>
"""


def write(path, text):
    """Write text to path, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


def make_site(root, template=TEMPLATE, components=None, core_styles=None,
              core_scripts=None, images=None, fonts=None):
    """Lay out a project tree under root.

    components : dict of {DirName: {ext: text}}
    core_styles, core_scripts : dict of {filename: text}
    images, fonts : dict of {filename: bytes}
    """
    if template is not None:
        write(root / 'index-template.html', template)
    (root / 'components').mkdir(parents=True, exist_ok=True)
    for name, files in (components or {}).items():
        comp_dir = root / 'components' / name
        comp_dir.mkdir(parents=True, exist_ok=True)
        for ext, text in files.items():
            write(comp_dir / f'{name.lower()}.{ext}', text)
    for filename, text in (core_styles or {}).items():
        write(root / 'core' / 'styles' / filename, text)
    for filename, text in (core_scripts or {}).items():
        write(root / 'core' / 'scripts' / filename, text)
    for kind, files in (('images', images), ('fonts', fonts)):
        for filename, data in (files or {}).items():
            path = root / 'core' / 'assets' / kind / filename
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
    return root


@pytest.fixture
def site(tmp_path):
    """A small site: two components, core files and one image."""
    make_site(
        tmp_path,
        components={
            'Header': {'html': '<header>top</header>',
                       'css': '.header { color: red; }',
                       'js': 'function initHeader() {}'},
            'About': {'html': '<p>hi</p>',
                      'css': ".about { background: url('core/assets/images/bg.png'); }"},
        },
        core_styles={'variables.css': ':root { --x: 1; }',
                     'reset.css': '* { margin: 0; }'},
        core_scripts={'utils.js': 'const DOM = {};',
                      'main.js': 'document.addEventListener("DOMContentLoaded", init);'},
        images={'logo.png': b'\x89PNG\r\n\x1a\nlogo', 'bg.png': b'\x89PNGbg'},
        fonts={'inter.woff2': b'wOF2font'},
    )
    return tmp_path


@pytest.fixture
def config(site):
    """Quiet default config rooted at the `site` fixture."""
    return BuildConfig(root=site, quiet=True)
