"""Project analysis: route discovery and entry-file inspection."""

from seo_bootstrap.analyzer.project import (
    FrameworkInfo,
    analyze_project,
    detect_framework,
    detect_mount_element_id,
    detect_routes,
)

__all__ = [
    "FrameworkInfo",
    "analyze_project",
    "detect_framework",
    "detect_mount_element_id",
    "detect_routes",
]
