"""
Operation id derivation.

Builds camelCase operation ids such as ``listUsers`` or ``getUser`` from the
HTTP method and path when a descriptor does not provide one.
"""

import re
from typing import List

import inflect

from .constants import COMMON_PREFIXES

METHOD_VERBS = {
    'GET': 'get',
    'POST': 'create',
    'PUT': 'update',
    'PATCH': 'patch',
    'DELETE': 'delete',
    'HEAD': 'head',
    'OPTIONS': 'options',
}


def snake_case(name: str) -> str:
    """Convert camelCase or free text to snake_case."""
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    name = re.sub(r'[^a-zA-Z0-9]+', '_', name)
    return name.strip('_').lower()


class OperationNamer:
    """Derives operation ids from method and path."""

    def __init__(self):
        self.inflect_engine = inflect.engine()
        self.version_pattern = re.compile(r'^v\d+$')
        self.param_pattern = re.compile(r'^\{[^}]+\}$')

    def derive(self, method: str, path: str) -> str:
        """Build an operation id.

        Args:
            method: HTTP method, e.g. "GET"
            path: API path, e.g. "/api/v1/users/{id}"

        Returns:
            Operation id such as "getUser"; "operation" when nothing usable remains
        """
        method = (method or '').upper()
        segments = [s for s in (path or '').strip('/').split('/') if s]
        is_item = bool(segments) and bool(self.param_pattern.match(segments[-1]))
        resources = self._resources(segments)

        if not resources:
            return METHOD_VERBS.get(method, method.lower()) or 'operation'

        resource = resources[-1]
        if method == 'GET' and not is_item:
            verb = 'list'
            noun = self._plural(resource)
        else:
            verb = METHOD_VERBS.get(method, method.lower() or 'call')
            noun = self._singular(resource)

        return verb + self._camel(noun)

    def _resources(self, segments: List[str]) -> List[str]:
        return [
            s.lower() for s in segments
            if not self.param_pattern.match(s)
            and not self.version_pattern.match(s.lower())
            and s.lower() not in COMMON_PREFIXES
        ]

    def _singular(self, word: str) -> str:
        singular = self.inflect_engine.singular_noun(word)
        return singular if singular else word

    def _plural(self, word: str) -> str:
        # singular_noun returns False for words that are already singular
        if self.inflect_engine.singular_noun(word):
            return word
        return self.inflect_engine.plural_noun(word)

    @staticmethod
    def _camel(text: str) -> str:
        parts = [p for p in re.split(r'[^a-zA-Z0-9]+', text) if p]
        return ''.join(p[:1].upper() + p[1:] for p in parts)
