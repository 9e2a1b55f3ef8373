import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from reckon.core.errors import ReckonError

DEFAULT_CONFIG_NAME = "reckon.toml"

DIAGNOSTIC_STYLES = ("full", "compact")


class ConfigError(ReckonError):
    """Raised when reckon.toml is malformed."""


@dataclass
class OutputConfig:
    """How results are printed."""

    precision: int | None = None  # significant digits, None = shortest repr


@dataclass
class DiagnosticsConfig:
    """How evaluation errors are reported."""

    style: str = "full"  # "full" | "compact"


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class ReplConfig:
    prompt: str = ">>> "


@dataclass
class ReckonConfig:
    """Settings read from reckon.toml.

    Example:

        [output]
        precision = 12

        [diagnostics]
        style = "compact"

        [logging]
        level = "DEBUG"

        [repl]
        prompt = "= "
    """

    output: OutputConfig = field(default_factory=OutputConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    repl: ReplConfig = field(default_factory=ReplConfig)
    path: Path | None = None


def load_config(path: Path | None = None) -> ReckonConfig:
    """Load reckon.toml, falling back to defaults when the file is absent."""
    if path is None:
        path = Path.cwd() / DEFAULT_CONFIG_NAME
    if not path.exists():
        return ReckonConfig()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e

    output_data = data.get("output", {})
    diagnostics_data = data.get("diagnostics", {})
    logging_data = data.get("logging", {})
    repl_data = data.get("repl", {})

    precision = output_data.get("precision")
    if precision is not None and (not isinstance(precision, int) or precision < 1):
        raise ConfigError(f"{path}: output.precision must be a positive integer")

    style = diagnostics_data.get("style", "full")
    if style not in DIAGNOSTIC_STYLES:
        raise ConfigError(
            f"{path}: diagnostics.style must be one of {', '.join(DIAGNOSTIC_STYLES)}, got {style!r}"
        )

    return ReckonConfig(
        output=OutputConfig(precision=precision),
        diagnostics=DiagnosticsConfig(style=style),
        logging=LoggingConfig(level=str(logging_data.get("level", "WARNING")).upper()),
        repl=ReplConfig(prompt=repl_data.get("prompt", ">>> ")),
        path=path,
    )


def format_value(value: float, precision: int | None = None) -> str:
    """Render a result: integral values without a fraction, others by repr or precision."""
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    if precision is not None:
        return f"{value:.{precision}g}"
    return repr(value)
