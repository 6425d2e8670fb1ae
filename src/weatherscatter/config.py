"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths and magic numbers (margins, kernel
   bandwidth, brush width, ...) being scattered throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (sample datasets) when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_DATA_PATH (str): Absolute path to the bundled weather dataset.
"""
import sys
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/weatherscatter/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Paths
ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_DATA_PATH: str = os.path.join(ASSETS_PATH, "my_weather_data.json")

# Chart layout (pixels)
MARGIN_TOP: float = 90.0
MARGIN_RIGHT: float = 90.0
MARGIN_BOTTOM: float = 50.0
MARGIN_LEFT: float = 50.0
LEGEND_WIDTH: float = 250.0
LEGEND_HEIGHT: float = 26.0
LEGEND_OFFSET_RIGHT: float = 9.0    # gap between legend and right edge of the plot
LEGEND_OFFSET_BOTTOM: float = 37.0  # legend top measured up from the bottom edge
LEGEND_HIGHLIGHT_FRACTION: float = 0.05
MIN_CHART_SIZE: float = 400.0

# Scales
DOMAIN_ROUNDING: float = 100.0
DENSITY_DOMAIN_MAX: float = 0.03
BRUSHED_DENSITY_MIN_EXTENT: float = 10.0  # top strip height used by brushed curves
BRUSHED_DENSITY_MAX_INSET: float = 80.0   # right strip width reserved from brushed curves

# Density estimation
KDE_BANDWIDTH: float = 7.0
KDE_GRID_SIZE: int = 50
CURVE_SAMPLES_PER_SEGMENT: int = 8  # marginal area smoothing

# Brush
BRUSH_WINDOW_DAYS: int = 30
DIMMED_OPACITY: float = 0.05
RESTORE_DURATION_MS: int = 500

# Points & hover
POINT_RADIUS: float = 3.0
HOVER_DOT_RADIUS: float = 6.0
STRIP_MARKER_SIZE: float = 15.0
STRIP_MARKER_COLOR: str = "skyblue"
STRIP_MARKER_OPACITY: float = 0.8
TOOLTIP_OFFSET_X: float = -90.0
TOOLTIP_OFFSET_Y: float = 25.0

# Marginal curves
GLOBAL_CURVE_FILL: str = "grey"
GLOBAL_CURVE_OPACITY: float = 0.35
BRUSHED_CURVE_OPACITY: float = 0.7
BRUSHED_CURVE_STROKE: str = "white"

# Formats
TOOLTIP_DATE_FORMAT: str = "%A, %B %d, %Y"
LEGEND_DATE_FORMAT: str = "%B %d"
LEGEND_TICK_FORMAT: str = "%b"

# Colour per month, keyed "01".."12"
MONTH_KEYS: tuple[str, ...] = tuple(f"{m:02d}" for m in range(1, 13))
MONTH_COLORS: tuple[str, ...] = (
    "#2196f3", "#212bf3", "#7f21f3", "#e821f3", "#f32194", "#f3212b",
    "#f37f21", "#f3e821", "#94f321", "#2bf321", "#21f380", "#21f3e8",
)
LEGEND_TICK_MONTHS: tuple[int, ...] = (4, 7, 10)
AXIS_TICK_COUNT: int = 4  # approximate, steps are 1, 2 or 5 x 10^k
LEGEND_GRADIENT_STOPS: int = 10

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")
