"""Static page assembler: merges component folders into one deployable page."""

from sitebuild.assemble import (
    BuildReport, StrictBuildError, build_html, build_css, build_js,
    copy_assets, update_asset_paths, run_build,
)
from sitebuild.config import BuildConfig, load_config

__version__ = '0.1.0'
