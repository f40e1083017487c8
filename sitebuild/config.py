"""Build configuration with YAML loading and profile inheritance.

A config file is either a flat mapping of `BuildConfig` fields or a
`profiles:` mapping where each profile may name a `base:` profile that
it is deep-merged over.
"""

import copy
import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


CORE_STYLES = [
    'variables.css',
    'reset.css',
    'typography.css',
    'layout.css',
    'utilities.css',
]

CORE_SCRIPTS = [
    'utils.js',
    'main.js',
]

ASSET_KINDS = ['images', 'fonts']

HTML_REWRITES = {
    'src="core/assets/images/': 'src="build/assets/images/',
    'href="core/assets/images/': 'href="build/assets/images/',
}

CSS_REWRITES = {
    "url('core/assets/images/": "url('build/assets/images/",
    "url('core/assets/fonts/": "url('build/assets/fonts/",
}

DEFAULT_CONFIG_FILE = 'sitebuild.yaml'

_PATH_FIELDS = (
    'components_dir', 'core_styles_dir', 'core_scripts_dir',
    'core_assets_dir', 'build_dir', 'template_file',
)
_LIST_FIELDS = ('core_styles', 'core_scripts', 'asset_kinds', 'components')
_MAPPING_FIELDS = ('html_rewrites', 'css_rewrites')
_FLAG_FIELDS = ('strict', 'verbose', 'quiet', 'prune_stale_assets')


@dataclass
class BuildConfig:
    """Everything the pipeline needs to know about a site.

    Attributes
    ----------
    root : Path
        Project root; every relative path below is resolved against it.
    components_dir, core_styles_dir, core_scripts_dir, core_assets_dir : str
        Input directories.
    build_dir : str
        Output directory, created on demand.
    template_file : str
        Page template holding `<!-- NAME -->` placeholders.
    core_styles, core_scripts : list of str
        Core files concatenated ahead of any component, in list order.
    asset_kinds : list of str
        Subdirectories of `core_assets_dir` copied flat into
        `build_dir/assets/<kind>/`.
    components : list of str or None
        Explicit ordered manifest of component directory names.  None
        means every component directory, sorted by name.
    html_rewrites, css_rewrites : dict
        Literal prefix replacements applied to the merged HTML and CSS.
    strict : bool
        Fail the build when it produces warnings.
    verbose : bool
        Print warnings even when not strict.
    quiet : bool
        Suppress progress output.
    prune_stale_assets : bool
        Delete copied assets that no longer exist in the source.
    """
    root: Path = field(default_factory=Path)
    components_dir: str = 'components'
    core_styles_dir: str = 'core/styles'
    core_scripts_dir: str = 'core/scripts'
    core_assets_dir: str = 'core/assets'
    build_dir: str = 'build'
    template_file: str = 'index-template.html'
    core_styles: list = field(default_factory=lambda: list(CORE_STYLES))
    core_scripts: list = field(default_factory=lambda: list(CORE_SCRIPTS))
    asset_kinds: list = field(default_factory=lambda: list(ASSET_KINDS))
    components: Optional[list] = None
    html_rewrites: dict = field(default_factory=lambda: dict(HTML_REWRITES))
    css_rewrites: dict = field(default_factory=lambda: dict(CSS_REWRITES))
    strict: bool = False
    verbose: bool = False
    quiet: bool = False
    prune_stale_assets: bool = False

    def __post_init__(self):
        self.root = Path(self.root)

    def resolve(self, relpath):
        """Resolve a config path against the project root."""
        return self.root / relpath

    @property
    def components_path(self):
        return self.resolve(self.components_dir)

    @property
    def core_styles_path(self):
        return self.resolve(self.core_styles_dir)

    @property
    def core_scripts_path(self):
        return self.resolve(self.core_scripts_dir)

    @property
    def core_assets_path(self):
        return self.resolve(self.core_assets_dir)

    @property
    def build_path(self):
        return self.resolve(self.build_dir)

    @property
    def template_path(self):
        return self.resolve(self.template_file)


def _deep_merge(base, overrides):
    """Recursively merge overrides into base dict.

    - Scalars and lists in overrides replace base values
    - Dicts are merged recursively
    - None values in overrides remove the key
    """
    result = copy.deepcopy(base)
    for key, value in overrides.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _resolve_profile(name, all_raw, resolved_cache, chain=()):
    """Resolve a single profile, following base references."""
    if name in resolved_cache:
        return resolved_cache[name]
    if name in chain:
        cycle = ' -> '.join(chain + (name,))
        raise ValueError(f"Profile inheritance cycle: {cycle}")

    raw = all_raw[name] or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Profile '{name}' must be a mapping")

    if 'base' in raw:
        base_name = raw['base']
        if base_name not in all_raw:
            raise ValueError(
                f"Profile '{name}' references unknown base '{base_name}'")
        base_resolved = _resolve_profile(
            base_name, all_raw, resolved_cache, chain + (name,))
        overrides = {k: v for k, v in raw.items() if k != 'base'}
        resolved = _deep_merge(base_resolved, overrides)
    else:
        resolved = copy.deepcopy(raw)

    resolved_cache[name] = resolved
    return resolved


def config_from_dict(cfg, root=None):
    """Build a `BuildConfig` from a plain mapping.

    Parameters
    ----------
    cfg : dict
        Field values; missing fields keep their defaults.
    root : str or Path, optional
        Project root.  Overrides a `root` key in `cfg`; a relative `root`
        key is itself taken relative to the current directory.

    Raises
    ------
    ValueError
        On unknown keys or values of the wrong shape.
    """
    known = {f.name for f in dataclasses.fields(BuildConfig)}
    unknown = sorted(set(cfg) - known)
    if unknown:
        raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")

    values = {}
    for key, value in cfg.items():
        # null keeps the default; only the manifest is meaningfully None
        if value is None and key != 'components':
            continue
        if key in _PATH_FIELDS:
            if not isinstance(value, str):
                raise ValueError(f"'{key}' must be a path string, got {value!r}")
        elif key in _LIST_FIELDS:
            if value is not None and not (
                    isinstance(value, list)
                    and all(isinstance(v, str) for v in value)):
                raise ValueError(f"'{key}' must be a list of names")
            value = list(value) if value is not None else None
        elif key in _MAPPING_FIELDS:
            if not isinstance(value, dict):
                raise ValueError(f"'{key}' must be a mapping of old: new")
            value = {str(k): str(v) for k, v in value.items()}
        elif key in _FLAG_FIELDS:
            if not isinstance(value, bool):
                raise ValueError(f"'{key}' must be true or false, got {value!r}")
        values[key] = value

    if root is not None:
        values['root'] = Path(root)
    return BuildConfig(**values)


def load_config(path, profile=None, root=None):
    """Load a build configuration from YAML.

    Supports:
    - Flat file: top-level keys are `BuildConfig` fields
    - Profiles: `profiles:` mapping with `base:` inheritance, selected by
      name (default profile: `default`)

    Parameters
    ----------
    path : str or Path
        Path to YAML config file.
    profile : str, optional
        Profile to select when the file defines `profiles:`.
    root : str or Path, optional
        Project root.  Defaults to the `root` key of the selected config,
        resolved against the config file's directory, or the directory
        itself.

    Returns
    -------
    BuildConfig
    """
    path = Path(path)
    with open(path, encoding='utf-8') as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raise ValueError(f"Empty config file: {path}")
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must hold a mapping: {path}")

    if 'profiles' in raw:
        profiles_raw = raw['profiles'] or {}
        name = profile or 'default'
        if name not in profiles_raw:
            raise ValueError(
                f"Unknown profile '{name}' in {path} "
                f"(available: {', '.join(profiles_raw) or 'none'})")
        cfg = _resolve_profile(name, profiles_raw, {})
    else:
        if profile is not None:
            raise ValueError(f"Config {path} defines no profiles")
        cfg = raw

    if root is None:
        root = path.parent / (cfg.get('root') or '.')
    cfg = {k: v for k, v in cfg.items() if k != 'root'}
    return config_from_dict(cfg, root=root)
