import yaml
from pydantic import ValidationError

from perfgate.common.config import ConfigError, PublisherConfig


def load_publisher_config(path: str = "perfgate.yaml") -> PublisherConfig:
    """Load thresholds and parser configuration from a YAML file.

    The file holds a ``thresholds`` mapping and a ``parsers`` list, e.g.::

        thresholds:
          error_failed: 10
          perf_percent_unstable: 20
          perf_time_unstable: 50
        parsers:
          - format: summary
            glob: "**/*.json"

    Args:
        path: Path to the config YAML file

    Returns:
        PublisherConfig loaded from the file, or defaults if the file is empty

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ConfigError: If the file content is not a valid configuration
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(
            f"{path!r} not found. Please create a perfgate configuration file."
        ) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path!r}: {e}") from e

    if data is None:
        return PublisherConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{path!r} must contain a mapping at the top level")

    try:
        return PublisherConfig(
            thresholds=data.get("thresholds") or {},
            parsers=data.get("parsers") or [],
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path!r}: {e}") from e
