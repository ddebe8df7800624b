import json
import yaml
from typing import Any, Callable
from pathlib import Path

from config.models.transport import AiohttpServiceConfig


class TransportConfigLoader:
    """
    Load + validate transport service configs from YAML/JSON.

    - The document may hold the settings at the top level or under a
      `transport` key.
    - Result is a fully validated AiohttpServiceConfig
    """

    def __init__(self, section: str = "transport") -> None:
        self._section = section

    def from_yaml(self, source: str | Path) -> AiohttpServiceConfig:
        data = self._load(source, parser=yaml.safe_load)
        return self._build(data)

    def from_json(self, source: str | Path) -> AiohttpServiceConfig:
        data = self._load(source, parser=json.loads)
        return self._build(data)

    def from_mapping(self, data: dict[str, Any]) -> AiohttpServiceConfig:
        return self._build(data)

    def _load(
        self,
        source: str | Path,
        *,
        parser: Callable[[str], Any],
    ) -> Any:
        """
        Load config from a file path or raw string, then parse.
        """
        text = self._read_source(source)
        return parser(text)

    def _read_source(self, source: str | Path) -> str:
        """
        Read source as text.
        If `source` is a file path, read it.
        Otherwise treat it as raw content.
        """
        if isinstance(source, Path):
            return source.read_text()

        # string: path or raw content?
        p = Path(source)
        try:
            if p.is_file():
                return p.read_text()
        except OSError:
            pass  # raw content too long to be a path

        return source

    def _build(self, data: Any) -> AiohttpServiceConfig:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Transport config must be a mapping, got {type(data).__name__}")

        if self._section in data:
            data = data[self._section] or {}

        return AiohttpServiceConfig.model_validate(data)
