r"""Query string and JSON encoders for request parameters.

Parameters are nested structures of mappings, lists, tuples and sets
whose leaves are strings (other scalars are converted with ``str``).

Example:
    ```pycon
    >>> from arequest.encoding import query_string_from_parameters
    >>> query_string_from_parameters({"user": {"name": "Fritz", "age": "68"}})
    'user[age]=68&user[name]=Fritz'
    >>> query_string_from_parameters({"numbers": ["1", "2"]})
    'numbers[]=1&numbers[]=2'

    ```
"""

from __future__ import annotations

__all__ = [
    "ParameterEncoding",
    "json_string_from_parameters",
    "percent_encode",
    "query_string_from_parameters",
    "query_string_pairs",
]

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any
from urllib.parse import quote

# Punctuation left unescaped on top of what ``quote`` never escapes
_SAFE_CHARACTERS = "\"'()*[\\]^`{|}"


class ParameterEncoding(Enum):
    """How parameters are encoded in a request body.

    Attributes:
        FORM: ``application/x-www-form-urlencoded`` query string.
        JSON: ``application/json`` document.
    """

    FORM = "application/x-www-form-urlencoded"
    JSON = "application/json"

    @property
    def content_type(self) -> str:
        """The MIME type of bodies produced by this encoding."""
        return self.value

    def encode(self, parameters: Mapping[str, Any], encoding: str = "utf-8") -> str:
        """Encode parameters as a request body.

        Args:
            parameters: The parameters to encode.
            encoding: The character encoding used for percent-escaping.

        Returns:
            The encoded body.
        """
        if self is ParameterEncoding.JSON:
            return json_string_from_parameters(parameters)
        return query_string_from_parameters(parameters, encoding)


def percent_encode(value: str, encoding: str = "utf-8") -> str:
    r"""Percent-escape a query string key or value.

    The value is encoded with ``encoding``; every byte outside printable
    ASCII and every character of `` %$&+,/:!;=?@<>#`` becomes ``%XX``.

    Args:
        value: The string to escape.
        encoding: The character encoding of the escaped bytes.

    Returns:
        The escaped string.

    Example:
        ```pycon
        >>> from arequest.encoding import percent_encode
        >>> percent_encode("a b&c")
        'a%20b%26c'
        >>> percent_encode("é")
        '%C3%A9'

        ```
    """
    return quote(value, safe=_SAFE_CHARACTERS, encoding=encoding)


def query_string_pairs(parameters: Mapping[str, Any]) -> list[tuple[str, str | None]]:
    """Flatten nested parameters into ordered ``(field, value)`` pairs.

    Mapping keys are sorted. Nested mappings produce ``key[subkey]``
    fields, lists, tuples and sets produce ``key[]`` fields (set members
    are sorted). Mapping entries whose value is ``None`` are omitted; a
    ``None`` list item produces a pair without value.

    Args:
        parameters: The parameters to flatten.

    Returns:
        The pairs, in query string order.

    Raises:
        TypeError: If ``parameters`` is not a mapping.

    Example:
        ```pycon
        >>> from arequest.encoding import query_string_pairs
        >>> query_string_pairs({"b": "2", "a": {"y": "1", "x": ["0"]}})
        [('a[x][]', '0'), ('a[y]', '1'), ('b', '2')]

        ```
    """
    if not isinstance(parameters, Mapping):
        msg = f"parameters must be a mapping, got {type(parameters).__name__}"
        raise TypeError(msg)
    return _pairs_from_key_and_value(None, parameters)


def _pairs_from_key_and_value(key: str | None, value: Any) -> list[tuple[str, str | None]]:
    pairs: list[tuple[str, str | None]] = []
    if isinstance(value, Mapping):
        for nested_key in sorted(value, key=str):
            nested_value = value[nested_key]
            if nested_value is None:
                continue
            field = str(nested_key) if key is None else f"{key}[{nested_key}]"
            pairs.extend(_pairs_from_key_and_value(field, nested_value))
    elif isinstance(value, (list, tuple)):
        for item in value:
            pairs.extend(_pairs_from_key_and_value(f"{key}[]", item))
    elif isinstance(value, (set, frozenset)):
        for item in sorted(value, key=str):
            pairs.extend(_pairs_from_key_and_value(f"{key}[]", item))
    elif value is None:
        pairs.append((key, None))
    else:
        pairs.append((key, str(value)))
    return pairs


def query_string_from_parameters(parameters: Mapping[str, Any], encoding: str = "utf-8") -> str:
    """Encode nested parameters as a ``key=value&...`` query string.

    Args:
        parameters: The parameters to encode.
        encoding: The character encoding used for percent-escaping.

    Returns:
        The query string, without leading ``?``.

    Example:
        ```pycon
        >>> from arequest.encoding import query_string_from_parameters
        >>> query_string_from_parameters({"q": "a+b", "tags": {"x", "y"}})
        'q=a%2Bb&tags[]=x&tags[]=y'

        ```
    """
    components = []
    for field, value in query_string_pairs(parameters):
        if value is None:
            components.append(percent_encode(field, encoding))
        else:
            components.append(f"{percent_encode(field, encoding)}={percent_encode(value, encoding)}")
    return "&".join(components)


def _json_default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def json_string_from_parameters(parameters: Mapping[str, Any]) -> str:
    """Encode nested parameters as a compact JSON document.

    Keys are sorted and sets are rendered as sorted arrays.

    Args:
        parameters: The parameters to encode.

    Returns:
        The JSON document.

    Example:
        ```pycon
        >>> from arequest.encoding import json_string_from_parameters
        >>> json_string_from_parameters({"user": {"name": "Fritz", "age": "68"}})
        '{"user":{"age":"68","name":"Fritz"}}'

        ```
    """
    return json.dumps(
        parameters,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_json_default,
    )
