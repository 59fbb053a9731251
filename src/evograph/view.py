"""View transform helpers for the presentation layer."""

from dataclasses import dataclass, replace

from evograph.config import settings


def apply_zoom(
    current_scale: float,
    delta: float,
    min_scale: float | None = None,
    max_scale: float | None = None,
) -> float:
    """Add ``delta`` to the scale and clamp it to the zoom range."""
    low = min_scale if min_scale is not None else settings.zoom_min
    high = max_scale if max_scale is not None else settings.zoom_max
    return min(max(current_scale + delta, low), high)


@dataclass(frozen=True)
class ViewTransform:
    """Scale and translation applied when drawing."""

    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def zoomed(self, delta: float) -> "ViewTransform":
        return replace(self, scale=apply_zoom(self.scale, delta))

    def panned(self, dx: float, dy: float) -> "ViewTransform":
        return replace(self, translate_x=self.translate_x + dx, translate_y=self.translate_y + dy)

    def to_svg(self) -> str:
        """SVG ``transform`` attribute value."""
        return f"translate({self.translate_x},{self.translate_y}) scale({self.scale})"
