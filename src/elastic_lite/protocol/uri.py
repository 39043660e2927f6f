"""URI construction from templated base addresses.

Templates carry literal text plus optional path-segment groups such as
``http://host:9200{/index,type,suffix}``. Each variable of a group expands to
``/<percent-encoded value>`` when it has a non-empty value, and disappears
(separator included) otherwise.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from urllib.parse import quote, urlencode

from elastic_lite.errors import MalformedTemplateError

_PATH_OPERATOR = "/"
_VARIABLE_NAME = re.compile(r"^[A-Za-z0-9_.]+$")

PathVariables = Mapping[str, str | None] | Sequence[tuple[str, str | None]]


@dataclass(frozen=True, slots=True)
class _Literal:
    text: str


@dataclass(frozen=True, slots=True)
class _PathGroup:
    names: tuple[str, ...]


def _parse_group(template: str, expression: str) -> _PathGroup:
    if not expression:
        raise MalformedTemplateError(template, "empty expression")
    operator, body = expression[0], expression[1:]
    if operator != _PATH_OPERATOR:
        raise MalformedTemplateError(template, f"unsupported operator '{operator}'")

    names = tuple(name.strip() for name in body.split(","))
    for name in names:
        if not _VARIABLE_NAME.match(name):
            raise MalformedTemplateError(template, f"invalid variable name '{name}'")
    return _PathGroup(names=names)


def parse_template(template: str) -> list[_Literal | _PathGroup]:
    """Split a URI template into literal text and path groups.

    Args:
        template (str): URI template.

    Raises:
        MalformedTemplateError: If a group is unterminated, nested, stray or invalid.

    Returns:
        list[_Literal | _PathGroup]: Template parts in order.

    """
    parts: list[_Literal | _PathGroup] = []
    cursor = 0
    while cursor < len(template):
        start = template.find("{", cursor)
        stray = template.find("}", cursor)
        if stray != -1 and (start == -1 or stray < start):
            raise MalformedTemplateError(template, f"unexpected '}}' at position {stray}")
        if start == -1:
            parts.append(_Literal(template[cursor:]))
            break

        if start > cursor:
            parts.append(_Literal(template[cursor:start]))
        end = template.find("}", start + 1)
        if end == -1:
            raise MalformedTemplateError(template, f"unterminated group at position {start}")
        expression = template[start + 1 : end]
        if "{" in expression:
            raise MalformedTemplateError(template, f"nested group at position {start}")
        parts.append(_parse_group(template, expression))
        cursor = end + 1
    return parts


def _lookup(path_variables: PathVariables | None) -> dict[str, str | None]:
    if path_variables is None:
        return {}
    return dict(path_variables)


def expand_path(template: str, path_variables: PathVariables | None) -> str:
    """Expand the path groups of a URI template.

    Args:
        template (str): URI template.
        path_variables (PathVariables | None): Values for template variables.
            Missing, ``None`` and empty values are omitted. Variables the
            template does not declare are ignored.

    Returns:
        str: Expanded URI without query string.

    """
    values = _lookup(path_variables)
    expanded: list[str] = []
    for part in parse_template(template):
        if isinstance(part, _Literal):
            expanded.append(part.text)
            continue
        for name in part.names:
            value = values.get(name)
            if value:
                expanded.append(_PATH_OPERATOR + quote(value, safe=""))
    return "".join(expanded)


def encode_query(query_variables: Mapping[str, str]) -> str:
    """Percent-encode query variables with keys sorted for stable output.

    Args:
        query_variables (Mapping[str, str]): Query parameters.

    Returns:
        str: Encoded `key=value` pairs joined with `&`.

    """
    return urlencode(sorted(query_variables.items()))


def build_uri(
    template: str,
    path_variables: PathVariables | None = None,
    query_variables: Mapping[str, str] | None = None,
) -> str:
    """Build a request URI from a template, path variables and query variables.

    A non-``None`` query mapping always appends ``?``, even when empty.

    Args:
        template (str): URI template.
        path_variables (PathVariables | None): Values for template variables.
        query_variables (Mapping[str, str] | None): Query parameters.

    Raises:
        MalformedTemplateError: If the template cannot be parsed.

    Returns:
        str: Request URI.

    """
    uri = expand_path(template, path_variables)
    if query_variables is not None:
        return f"{uri}?{encode_query(query_variables)}"
    return uri
