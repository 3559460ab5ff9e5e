"""Archive round trip: extract, locate the project root, repackage.

Quick usage::

    from seo_bootstrap.archive import working_directory, extract, detect_project_root, pack

    with working_directory() as workdir:
        extract("site.zip", workdir)
        root = detect_project_root(workdir)
        ...
        pack(root, "site-seo-ssg.zip")
"""

from seo_bootstrap.archive.roundtrip import (
    MANIFEST_NAME,
    detect_project_root,
    extract,
    output_archive_path,
    pack,
    working_directory,
)

__all__ = [
    "MANIFEST_NAME",
    "detect_project_root",
    "extract",
    "output_archive_path",
    "pack",
    "working_directory",
]
