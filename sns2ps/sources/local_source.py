import logging
import os
from typing import Any

import yaml

from sns2ps.exceptions import ParseError
from sns2ps.sources.base_source import BaseSource, Resource

logger = logging.getLogger(__name__)

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


class LocalSource(BaseSource):
    """Source that serves bundled fixture data instead of calling the API.

    URLs and credentials are accepted for interface compatibility and ignored.
    """

    def __init__(self, fixtures_dir: str = FIXTURES_DIR):
        """Initializes the LocalSource.

        Args:
            fixtures_dir: Directory holding match.yaml, squads.yaml and
                competitors.yaml.
        """
        self.fixtures_dir = fixtures_dir

    def fixture_path(self, resource: Resource) -> str:
        return os.path.join(self.fixtures_dir, f"{resource.value}.yaml")

    def get_payload(
        self, url: str, resource: Resource, username: str, password: str
    ) -> Any:
        yaml_path = self.fixture_path(resource)
        logger.info(f"Serving {resource.value} from fixture {yaml_path}")
        try:
            with open(yaml_path, encoding="utf-8") as f:
                return yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ParseError(
                f"Failed to load fixture {yaml_path}: {e}",
                resource=resource.value,
            ) from e
