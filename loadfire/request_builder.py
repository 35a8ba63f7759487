"""Builds one outbound request from the shared config and an optional data row."""

import re
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from loadfire.config import LoadTestConfig
from loadfire.errors import InvalidHeader

# RFC 7230 token characters
_HEADER_NAME_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
# visible ASCII, space and horizontal tab
_HEADER_VALUE_RE = re.compile(r"[\t\x20-\x7e]*")


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


def substitute(template: Optional[str], row: Mapping[str, str]) -> Optional[str]:
    """Replace every ``${key}`` in ``template`` with ``row[key]``.

    Replacement is a single pass over the template, so values that themselves
    contain ``${...}`` are never expanded again. Unknown tokens are left as is.
    """
    if template is None:
        return None
    if not row:
        return template
    tokens = {"${%s}" % key: value for key, value in row.items()}
    pattern = re.compile("|".join(re.escape(token) for token in tokens))
    return pattern.sub(lambda match: tokens[match.group(0)], template)


def validate_header(name: str, value: str) -> None:
    if not name or not _HEADER_NAME_RE.fullmatch(name):
        raise InvalidHeader(name, value, "name is not a valid HTTP token")
    if not _HEADER_VALUE_RE.fullmatch(value):
        raise InvalidHeader(name, value, "value must be visible ASCII, spaces or tabs")


def build_request(config: LoadTestConfig, row: Optional[Mapping[str, str]] = None) -> RequestDescriptor:
    headers: Dict[str, str] = {}
    for name, value in (config.headers or {}).items():
        validate_header(name, value)
        headers[name] = value

    body = config.body
    if body is not None and row is not None:
        body = substitute(body, row)

    return RequestDescriptor(
        method=config.effective_method.value,
        url=config.url,
        headers=headers,
        body=body,
    )
