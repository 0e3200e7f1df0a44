"""Provides the document loading utilities."""

from typing import Any, Optional

import yaml

from hostlore.types import Category, Host, HostInfo
from hostlore.utils import as_key

class DecodeError(ValueError):
    """Raised when a document cannot be decoded into a `HostInfo`."""
    def __init__(self, msg: str, loc: Optional[str] = None):
        super().__init__(msg)
        self.loc = loc

    def __str__(self) -> str:
        msg = super().__str__()
        return msg if self.loc is None else f"{self.loc}: {msg}"

def _type_name(value: Any) -> str:
    return type(value).__name__

def _str_field(obj: dict[Any, Any], key: str, where: str, path: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"`{where}{key}` must be of type str, not {_type_name(value)}!", loc=path)
    return value

def _bool_field(obj: dict[Any, Any], key: str, where: str, path: str) -> bool:
    value = obj.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DecodeError(f"`{where}{key}` must be of type bool, not {_type_name(value)}!", loc=path)
    return value

def _decode_host(obj: Any, where: str, path: str) -> Host:
    if not isinstance(obj, dict):
        raise DecodeError(f"`{where}` must be a mapping, not {_type_name(obj)}!", loc=path)

    host = Host(fqdn=_str_field(obj, "fqdn", f"{where}.", path),
                summary=_str_field(obj, "summary", f"{where}.", path),
                kind=_str_field(obj, "kind", f"{where}.", path),
                primary=_bool_field(obj, "primary", f"{where}.", path))
    if not host.has_value():
        raise DecodeError(f"`{where}` must define a non-empty fqdn!", loc=path)
    return host

def _decode_category(name: str, obj: Any, path: str) -> Category:
    where = f"types.{name}"
    if obj is None:
        return Category()
    if not isinstance(obj, dict):
        raise DecodeError(f"`{where}` must be a mapping, not {_type_name(obj)}!", loc=path)

    hosts = obj.get("hosts")
    if hosts is None:
        hosts = []
    if not isinstance(hosts, list):
        raise DecodeError(f"`{where}.hosts` must be of type list, not {_type_name(hosts)}!", loc=path)

    return Category(summary=_str_field(obj, "summary", f"{where}.", path),
                    primary=_bool_field(obj, "primary", f"{where}.", path),
                    hosts=tuple(_decode_host(h, f"{where}.hosts[{i}]", path) for i, h in enumerate(hosts)))

def decode_document(data: bytes, path: str) -> HostInfo:
    """
    Decodes the given document contents and validates their structure.

    Parameters
    ----------
    data
        The raw YAML document.
    path
        The path of the document. Determines the identity of the result
        and is used as the location in error messages.

    Returns
    -------
    HostInfo
        The decoded document.

    Raises
    ------
    DecodeError
        The document is not valid YAML or doesn't have the expected shape.
    """
    try:
        obj = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise DecodeError(f"invalid yaml: {e}", loc=path) from e

    # An empty document (e.g. a bare _repo.yaml marker) is valid.
    if obj is None:
        obj = {}
    if not isinstance(obj, dict):
        raise DecodeError(f"document must be a mapping, not {_type_name(obj)}!", loc=path)

    types = obj.get("types")
    if types is None:
        types = {}
    if not isinstance(types, dict):
        raise DecodeError(f"`types` must be a mapping, not {_type_name(types)}!", loc=path)

    categories: dict[str, Category] = {}
    for name, category in types.items():
        if not isinstance(name, str):
            raise DecodeError(f"category name {name!r} must be of type str, not {_type_name(name)}!", loc=path)
        categories[name] = _decode_category(name, category, path)

    return HostInfo(type=_str_field(obj, "type", "", path),
                    summary=_str_field(obj, "summary", "", path),
                    types=categories,
                    id=as_key(path),
                    path=path)

def load_document(path: str) -> HostInfo:
    """
    Loads the document at the given path.

    Raises
    ------
    DecodeError
        The document is malformed.
    OSError
        The file could not be read.
    """
    with open(path, 'rb') as f:
        return decode_document(f.read(), path)
