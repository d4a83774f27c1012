import os
import platform
import subprocess
import logging
from typing import Optional

import psutil

from macdevice.core.exceptions import ResolverError

_LOG = logging.getLogger("macdevice.core.hardware")

MODEL_ENV_VAR = "MACDEVICE_MODEL"
SYSCTL_MODEL_KEY = "hw.model"
DEFAULT_TIMEOUT = 5.0


def _read_sysctl(key: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Read a single sysctl value as a string.

    Raises ResolverError if the command is missing, fails, times out
    or returns nothing.
    """
    try:
        result = subprocess.run(
            ["sysctl", "-n", key],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise ResolverError(f"sysctl not available: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise ResolverError(f"sysctl {key} timed out after {timeout}s") from e
    except OSError as e:
        raise ResolverError(f"sysctl {key} could not be run: {e}") from e

    if result.returncode != 0:
        raise ResolverError(
            f"sysctl {key} exited with {result.returncode}: {result.stderr.strip()}"
        )

    value = result.stdout.strip()
    if not value:
        raise ResolverError(f"sysctl {key} returned an empty value")
    return value


def model_identifier(override: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Return the host's hardware model identifier, e.g. "Mac16,12".

    An explicit override (argument or MACDEVICE_MODEL) wins over the host
    query. Returns "" when the identifier cannot be read.
    """
    override = (override or "").strip()
    if override:
        return override

    env_model = os.environ.get(MODEL_ENV_VAR, "").strip()
    if env_model:
        _LOG.debug(f"Using model identifier from {MODEL_ENV_VAR}: {env_model}")
        return env_model

    if platform.system() != "Darwin":
        _LOG.debug(f"Not running on macOS ({platform.system()}), no model identifier")
        return ""

    try:
        return _read_sysctl(SYSCTL_MODEL_KEY, timeout=timeout)
    except ResolverError as e:
        _LOG.warning(f"Failed to read model identifier: {e}")
        return ""


def battery_percent() -> Optional[float]:
    """Return the live battery charge in percent, or None if there is no battery."""
    try:
        battery = psutil.sensors_battery()
    except (AttributeError, NotImplementedError, OSError) as e:
        _LOG.debug(f"Battery sensors unavailable: {e}")
        return None

    if battery is None:
        return None
    return float(battery.percent)
