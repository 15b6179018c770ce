"""HTML renderer module - turns merged shape records into markup.

Renders resolved shapes to fragment markup including:
- Positional box styling with flex alignment
- Text blocks with token-resolved fonts and colors
- Images and bulleted lists
- Parametric vector outlines as inline SVG with stroke gating
"""

from slidemark.renderer.path_renderer import PathRenderer
from slidemark.renderer.shape_renderer import ShapeRenderer
from slidemark.renderer.style_renderer import StyleRenderer

__all__ = [
    "PathRenderer",
    "ShapeRenderer",
    "StyleRenderer",
]
