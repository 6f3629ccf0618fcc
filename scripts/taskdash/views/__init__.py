"""Rich renderables and frame composition for the dashboard."""

from taskdash.views.layout import compose_view

__all__ = ["compose_view"]
