"""Text and manifest transformations applied to a project tree.

- :mod:`~seo_bootstrap.transform.manifest` -- additive ``package.json`` merges
- :mod:`~seo_bootstrap.transform.config_rewriter` -- Vite config patching
- :mod:`~seo_bootstrap.transform.html` -- ``index.html`` entry script edits
"""

from seo_bootstrap.transform.config_rewriter import (
    ConfigRewriter,
    ensure_import,
    find_call_end,
    locate_config,
    remove_import_lines,
    remove_invocation,
    replace_invocation,
)
from seo_bootstrap.transform.manifest import (
    ensure_module_type,
    ensure_script,
    load_manifest,
    merge_dependencies,
    merge_scripts,
    pin_versions,
    save_manifest,
)

__all__ = [
    "ConfigRewriter",
    "ensure_import",
    "ensure_module_type",
    "ensure_script",
    "find_call_end",
    "load_manifest",
    "locate_config",
    "merge_dependencies",
    "merge_scripts",
    "pin_versions",
    "remove_import_lines",
    "remove_invocation",
    "replace_invocation",
    "save_manifest",
]
