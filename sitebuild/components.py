"""Component discovery.

A component is a directory `Name/` under the components root holding any
of `name.html`, `name.css`, `name.js` (lower-cased directory name).
"""

from dataclasses import dataclass
from pathlib import Path

from sitebuild.text import placeholder_for


@dataclass
class Component:
    """A component directory and the files it may provide."""
    name: str
    path: Path

    @property
    def stem(self):
        return self.name.lower()

    @property
    def placeholder(self):
        return placeholder_for(self.name)

    def file(self, ext):
        """Path of this component's `<stem>.<ext>` file (may not exist)."""
        return self.path / f'{self.stem}.{ext}'

    @property
    def html_file(self):
        return self.file('html')

    @property
    def css_file(self):
        return self.file('css')

    @property
    def js_file(self):
        return self.file('js')


def discover_components(components_dir, manifest=None, report=None):
    """List the components under components_dir in build order.

    Parameters
    ----------
    components_dir : str or Path
        Components root.  Must exist.
    manifest : list of str, optional
        Explicit ordered component names.  Without one, every
        subdirectory is used, sorted by name.
    report : BuildReport, optional
        Receives warnings for manifest entries with no directory and for
        directories the manifest leaves out.

    Returns
    -------
    list of Component
    """
    components_dir = Path(components_dir)
    dirs = {p.name: p for p in components_dir.iterdir() if p.is_dir()}

    if manifest is None:
        return [Component(name, dirs[name]) for name in sorted(dirs)]

    components = []
    seen = set()
    for name in manifest:
        if name in seen:
            continue
        seen.add(name)
        if name not in dirs:
            if report is not None:
                report.warn(f"manifest lists '{name}' but {components_dir / name} "
                            f"is not a directory")
            continue
        components.append(Component(name, dirs[name]))

    if report is not None:
        for name in sorted(set(dirs) - set(manifest)):
            report.warn(f"component '{name}' is not in the manifest and is skipped")
    return components
