"""JSONPath utilities for tolerantdiff."""

from __future__ import annotations

import logging
from typing import Any

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.jsonpath import Index

logger = logging.getLogger(__name__)


class JSONPathMatcher:
    """Utility class for JSONPath matching and removal."""

    # Cache for compiled JSONPath expressions
    _cache: dict = {}

    @classmethod
    def compile(cls, path: str):
        """Compile and cache a JSONPath expression."""
        if path not in cls._cache:
            try:
                cls._cache[path] = jsonpath_parse(path)
            except (JsonPathLexerError, JsonPathParserError) as e:
                raise ValueError(f"Invalid JSONPath expression '{path}': {e}")
        return cls._cache[path]

    @classmethod
    def delete_paths(cls, data: Any, paths: list[str]) -> Any:
        """
        Delete all nodes matching the given JSONPath expressions.

        Args:
            data: The data to modify (will be modified in place)
            paths: List of JSONPath expressions

        Returns:
            Modified data
        """
        for path in paths:
            data = cls._delete_path(data, path)
        return data

    @classmethod
    def _delete_path(cls, data: Any, path: str) -> Any:
        """Delete a single JSONPath from data."""
        expr = cls.compile(path)
        matches = expr.find(data)
        logger.debug("JSONPath %s matched %d node(s)", path, len(matches))

        # Process matches in reverse order to avoid index issues
        for match in reversed(matches):
            full_path = match.full_path
            if hasattr(full_path, "left") and hasattr(full_path, "right"):
                parents = full_path.left.find(data)
                if not parents:
                    continue
                parent_obj = parents[0].value
                key = full_path.right
            else:
                # top-level member; a match on the root itself has neither index nor fields
                parent_obj = data
                key = full_path

            if isinstance(key, Index):
                # Array index; newer releases keep a tuple of indices
                index = key.indices[0] if hasattr(key, 'indices') else key.index
                if isinstance(parent_obj, list) and 0 <= index < len(parent_obj):
                    del parent_obj[index]
            elif hasattr(key, 'fields'):
                # Object field
                for name in key.fields:
                    if isinstance(parent_obj, dict) and name in parent_obj:
                        del parent_obj[name]

        return data
