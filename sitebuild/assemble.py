"""Build pipeline: merge component folders into one deployable page.

Stages run in a fixed order, each reading only its inputs and the files
earlier stages wrote to the build directory:

    build_html -> build_css -> build_js -> copy_assets -> update_asset_paths

Every stage takes a `BuildConfig` and an optional `BuildReport` that
collects written files and warnings.
"""

import shutil
from dataclasses import dataclass, field

from sitebuild.components import discover_components
from sitebuild.text import (
    placeholder_for, replace_placeholder, find_placeholders,
    rewrite_asset_paths,
)


class StrictBuildError(RuntimeError):
    """Raised in strict mode when a build produced warnings."""


@dataclass
class BuildReport:
    """Outcome of a build.

    Attributes
    ----------
    written : list of Path
        Merged output files, in the order they were written.
    copied : list of Path
        Asset files copied into the build directory.
    removed : list of Path
        Stale assets deleted (prune mode only).
    warnings : list of str
        Orphaned placeholders/components, manifest mismatches, stale assets.
    """
    written: list = field(default_factory=list)
    copied: list = field(default_factory=list)
    removed: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    def warn(self, message):
        if message not in self.warnings:
            self.warnings.append(message)


def _log(config, message):
    if not config.quiet:
        print(message)


def _read_text(path):
    # newline='' and surrogateescape keep the bytes as they are on disk
    with open(path, encoding='utf-8', errors='surrogateescape', newline='') as f:
        return f.read()


def _write_text(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8', errors='surrogateescape',
              newline='') as f:
        f.write(text)


def build_html(config, report=None):
    """Substitute component HTML into the page template.

    Writes `<build>/index.html`.  A missing template raises
    FileNotFoundError; missing component HTML and unmatched placeholders
    are skipped.
    """
    if report is None:
        report = BuildReport()
    _log(config, 'Building HTML...')

    template = _read_text(config.template_path)
    markers = find_placeholders(template)
    inserted = set()

    html = template
    for comp in discover_components(config.components_path,
                                    config.components, report):
        if not comp.html_file.is_file():
            continue
        if comp.placeholder not in html:
            report.warn(f"component '{comp.name}' has no {comp.placeholder} "
                        f"placeholder in {config.template_file}")
            continue
        html = replace_placeholder(html, comp.name, _read_text(comp.html_file))
        inserted.add(comp.name.upper())

    for name, count in markers.items():
        if name not in inserted:
            report.warn(f"placeholder {placeholder_for(name)} has no "
                        f"matching component HTML")
        elif count > 1:
            report.warn(f"placeholder {placeholder_for(name)} appears "
                        f"{count} times; only the first was replaced")

    out = config.build_path / 'index.html'
    _write_text(out, html)
    report.written.append(out)
    _log(config, 'HTML build complete.')
    return out


def _concatenate(config, core_dir, core_files, ext, banner, report):
    """Core files in list order, then each component's `<stem>.<ext>`."""
    parts = []
    for filename in core_files:
        path = core_dir / filename
        if path.is_file():
            parts.append(_read_text(path) + '\n')

    for comp in discover_components(config.components_path,
                                    config.components, report):
        path = comp.file(ext)
        if path.is_file():
            parts.append(banner.format(name=comp.name))
            parts.append(_read_text(path) + '\n')
    return ''.join(parts)


def build_css(config, report=None):
    """Concatenate core and component stylesheets into `<build>/styles.css`."""
    if report is None:
        report = BuildReport()
    _log(config, 'Building CSS...')
    css = _concatenate(config, config.core_styles_path, config.core_styles,
                       'css', '/* {name} Component Styles */\n', report)
    out = config.build_path / 'styles.css'
    _write_text(out, css)
    report.written.append(out)
    _log(config, 'CSS build complete.')
    return out


def build_js(config, report=None):
    """Concatenate core and component scripts into `<build>/scripts.js`.

    Core scripts come first so helpers and the component initializer
    table exist before component code runs.
    """
    if report is None:
        report = BuildReport()
    _log(config, 'Building JavaScript...')
    js = _concatenate(config, config.core_scripts_path, config.core_scripts,
                      'js', '/* {name} Component Script */\n', report)
    out = config.build_path / 'scripts.js'
    _write_text(out, js)
    report.written.append(out)
    _log(config, 'JavaScript build complete.')
    return out


def copy_assets(config, report=None):
    """Copy each asset kind flat into `<build>/assets/<kind>/`.

    Existing files are overwritten.  Files that disappeared from the
    source stay in the build directory unless `prune_stale_assets` is set.

    Returns
    -------
    list of Path : files copied.
    """
    if report is None:
        report = BuildReport()
    _log(config, 'Copying assets...')

    copied = []
    for kind in config.asset_kinds:
        src_dir = config.core_assets_path / kind
        if not src_dir.is_dir():
            continue
        dest_dir = config.build_path / 'assets' / kind
        dest_dir.mkdir(parents=True, exist_ok=True)

        names = set()
        for src in sorted(src_dir.iterdir()):
            if not src.is_file():
                continue
            dest = dest_dir / src.name
            shutil.copy2(src, dest)
            names.add(src.name)
            copied.append(dest)

        for stale in sorted(dest_dir.iterdir()):
            if not stale.is_file() or stale.name in names:
                continue
            if config.prune_stale_assets:
                stale.unlink()
                report.removed.append(stale)
                _log(config, f'  Removed stale {kind}/{stale.name}')
            else:
                report.warn(f"stale asset {kind}/{stale.name} is no longer "
                            f"in {src_dir}")

    report.copied.extend(copied)
    _log(config, 'Assets copied.')
    return copied


def update_asset_paths(config, report=None):
    """Rewrite core asset prefixes in the merged HTML and CSS.

    Merged files that do not exist yet are skipped.
    """
    if report is None:
        report = BuildReport()
    _log(config, 'Updating asset paths...')

    targets = [
        (config.build_path / 'index.html', config.html_rewrites),
        (config.build_path / 'styles.css', config.css_rewrites),
    ]
    for path, rewrites in targets:
        if not path.is_file():
            continue
        _write_text(path, rewrite_asset_paths(_read_text(path), rewrites))

    _log(config, 'Asset paths updated.')


STAGES = (build_html, build_css, build_js, copy_assets, update_asset_paths)


def run_build(config):
    """Run every stage in order and return a `BuildReport`.

    Raises
    ------
    FileNotFoundError
        If the template or the components directory is missing.
    StrictBuildError
        In strict mode, after all outputs are written, if any warnings
        were collected.
    """
    report = BuildReport()
    _log(config, 'Starting build process...')

    for stage in STAGES:
        stage(config, report)

    if report.warnings and (config.verbose or config.strict):
        for message in report.warnings:
            print(f'  Warning: {message}')

    if config.strict and report.warnings:
        raise StrictBuildError(
            f"{len(report.warnings)} warning(s) in strict mode")

    _log(config, 'Build completed successfully!')
    return report
