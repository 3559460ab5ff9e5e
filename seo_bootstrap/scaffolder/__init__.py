"""Template rendering and artifact emission.

Quick usage::

    from seo_bootstrap.scaffolder import TemplateEmitter
    from seo_bootstrap.models import OverwritePolicy

    emitter = TemplateEmitter("/path/to/project")
    await emitter.emit(
        "shared/env.j2", ".env", {"base_url": "https://example.com"},
        policy=OverwritePolicy.CREATE_IF_ABSENT,
    )
"""

from seo_bootstrap.scaffolder.emitter import TemplateEmitter
from seo_bootstrap.scaffolder.templates import TemplateRenderer

__all__ = [
    "TemplateEmitter",
    "TemplateRenderer",
]
