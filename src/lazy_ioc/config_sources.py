"""Configuration trees for ``Blueprint.load_config()``.

A configuration tree is a nested mapping such as ``{"cache": {"path": ...}}``.
``load_config()`` flattens it with :func:`flatten_tree` and binds every leaf
as a value component under its dotted name (``cache.path``), so factories
can take it by parameter name or through ``ref("cache.path")``.
"""

import json
from typing import IO, Any, Dict, Mapping, Optional

from .exceptions import ConfigurationError


class TreeSource:
    """Something that yields a configuration tree.

    ``load_config()`` accepts a plain mapping as well; a source is only
    needed when the tree has to be read from somewhere.
    """

    def get_tree(self) -> Mapping[str, Any]:
        raise NotImplementedError


class DictSource(TreeSource):
    """Wraps a tree already held in memory.

    Example:
        >>> bp = Blueprint()
        >>> bp.load_config(DictSource({"mailer": {"sender": "ops@example.org"}}))
        >>> bp.build().get("mailer.sender")
        'ops@example.org'
    """

    def __init__(self, data: Mapping[str, Any]):
        self._data = data

    def get_tree(self) -> Mapping[str, Any]:
        return self._data


class _FileTreeSource(TreeSource):
    format_name = "?"

    def __init__(self, path: str):
        self._path = path

    def _parse(self, stream: IO[str]) -> Any:
        raise NotImplementedError

    def get_tree(self) -> Mapping[str, Any]:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = self._parse(f)
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load {self.format_name} config: {e}")
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{self.format_name} config must be a mapping at the top level: {self._path}")
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._path!r})"


class JsonTreeSource(_FileTreeSource):
    """Reads the tree from a JSON file whose top level is an object.

    Raises:
        ConfigurationError: If the file is missing, is not valid JSON, or
            its top level is not an object.
    """

    format_name = "JSON"

    def _parse(self, stream: IO[str]) -> Any:
        return json.load(stream)


class YamlTreeSource(_FileTreeSource):
    """Reads the tree from a YAML document (needs the ``yaml`` extra).

    An empty document yields an empty tree, so no components are bound.
    """

    format_name = "YAML"

    def _parse(self, stream: IO[str]) -> Any:
        try:
            import yaml
        except ImportError:
            raise ConfigurationError("PyYAML not installed (pip install lazy-ioc[yaml])")
        return yaml.safe_load(stream)


def flatten_tree(tree: Mapping[str, Any], prefix: Optional[str] = None) -> Dict[str, Any]:
    """Map each leaf of *tree* to its dotted component name.

    Lists, scalars and empty mappings are leaves and are bound as-is.
    """
    out: Dict[str, Any] = {}
    for k, v in tree.items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, Mapping) and v:
            out.update(flatten_tree(v, key))
        else:
            out[key] = v
    return out
