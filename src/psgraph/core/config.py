import logging
import math
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError
from .limits import DEFAULT_LIMIT_VALUE

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "psgraph.toml"

RGB = tuple[float, float, float]


# =============================================================================
# Page Configuration
# =============================================================================


@dataclass
class PageConfig:
    """Output page geometry in device units (1/72 inch)."""

    width: float = 595.0  # A4
    height: float = 842.0
    margin: float = 100.0  # Total space left around the plotted window
    font_name: str = "Courier"
    font_size: float = 12.0


@dataclass
class AxesConfig:
    """Axis, arrow and tick geometry."""

    overhang: float = 25.0  # How far the axes extend past the window
    tick_size: float = 5.0  # Half-length of ticks, arrowhead size
    dash_on: float = 5.0  # Boundary line dash pattern
    dash_off: float = 15.0


@dataclass
class SamplingConfig:
    """Curve sampling along the x axis."""

    step: float = 0.01


@dataclass
class ColorConfig:
    """RGB colours, components in 0..1."""

    axes: RGB = (1.0, 0.0, 0.0)
    bounds: RGB = (0.0, 0.0, 0.5)
    grid: RGB = (0.8, 0.8, 0.8)
    ticks: RGB = (0.0, 0.0, 0.0)
    curve: RGB = (0.0, 0.0, 0.0)


@dataclass
class RenderConfig:
    """Everything the renderer needs besides the limits and the expression.

    Examples in psgraph.toml:

        [page]
        width = 612
        height = 792

        [sampling]
        step = 0.005

        [colors]
        curve = [0.0, 0.4, 0.0]

        [limits]
        default = 5
    """

    page: PageConfig = field(default_factory=PageConfig)
    axes: AxesConfig = field(default_factory=AxesConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    colors: ColorConfig = field(default_factory=ColorConfig)
    default_limit: float = DEFAULT_LIMIT_VALUE


def _positive(table: str, key: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"[{table}] {key} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"[{table}] {key} must be positive, got {value!r}")
    return float(value)


def _non_negative(table: str, key: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"[{table}] {key} must be a number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ConfigError(f"[{table}] {key} must not be negative, got {value!r}")
    return float(value)


def _color(key: str, value: object) -> RGB:
    if not isinstance(value, list) or len(value) != 3:
        raise ConfigError(f"[colors] {key} must be a list of 3 numbers, got {value!r}")
    components = []
    for component in value:
        if isinstance(component, bool) or not isinstance(component, (int, float)):
            raise ConfigError(f"[colors] {key} must contain numbers, got {component!r}")
        if not 0 <= component <= 1:
            raise ConfigError(f"[colors] {key} components must be within 0..1, got {component!r}")
        components.append(float(component))
    return (components[0], components[1], components[2])


# Characters that end a PostScript name token
_PS_DELIMITERS = frozenset("()<>[]{}/%")


def _font_name(value: object) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"[page] font_name must be a non-empty string, got {value!r}")
    if not value.isascii() or any(
        not c.isprintable() or c.isspace() or c in _PS_DELIMITERS for c in value
    ):
        raise ConfigError(
            "[page] font_name must be a PostScript name (printable ASCII, "
            f"no spaces or delimiters), got {value!r}"
        )
    return value


def load_config(path: Path) -> RenderConfig:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    page_data = data.get("page", {})
    axes_data = data.get("axes", {})
    sampling_data = data.get("sampling", {})
    colors_data = data.get("colors", {})
    limits_data = data.get("limits", {})

    defaults = RenderConfig()

    page = PageConfig(
        width=_positive("page", "width", page_data.get("width", defaults.page.width)),
        height=_positive("page", "height", page_data.get("height", defaults.page.height)),
        margin=_non_negative("page", "margin", page_data.get("margin", defaults.page.margin)),
        font_name=_font_name(page_data.get("font_name", defaults.page.font_name)),
        font_size=_positive(
            "page", "font_size", page_data.get("font_size", defaults.page.font_size)
        ),
    )
    if page.margin >= min(page.width, page.height):
        raise ConfigError("[page] margin must be smaller than the page width and height")

    axes = AxesConfig(
        overhang=_non_negative(
            "axes", "overhang", axes_data.get("overhang", defaults.axes.overhang)
        ),
        tick_size=_positive(
            "axes", "tick_size", axes_data.get("tick_size", defaults.axes.tick_size)
        ),
        dash_on=_positive("axes", "dash_on", axes_data.get("dash_on", defaults.axes.dash_on)),
        dash_off=_positive(
            "axes", "dash_off", axes_data.get("dash_off", defaults.axes.dash_off)
        ),
    )

    sampling = SamplingConfig(
        step=_positive("sampling", "step", sampling_data.get("step", defaults.sampling.step)),
    )

    colors = ColorConfig(
        axes=_color("axes", colors_data.get("axes", list(defaults.colors.axes))),
        bounds=_color("bounds", colors_data.get("bounds", list(defaults.colors.bounds))),
        grid=_color("grid", colors_data.get("grid", list(defaults.colors.grid))),
        ticks=_color("ticks", colors_data.get("ticks", list(defaults.colors.ticks))),
        curve=_color("curve", colors_data.get("curve", list(defaults.colors.curve))),
    )

    default_limit = _positive(
        "limits", "default", limits_data.get("default", defaults.default_limit)
    )

    logger.debug("Loaded render config from %s", path)
    return RenderConfig(
        page=page,
        axes=axes,
        sampling=sampling,
        colors=colors,
        default_limit=default_limit,
    )


def find_config(directory: Path) -> Path | None:
    """Return ``directory/psgraph.toml`` if it exists."""
    candidate = directory / CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    return None
