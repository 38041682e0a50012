# locked_preview/engine/record_redactor.py

"""Table-driven, shape-preserving redaction of nested records."""

import logging
from typing import Any, Dict, Mapping, Optional

from locked_preview.core.definitions import LOCK_PLACEHOLDER, ROOT_SCHEMA
from locked_preview.core.loader import PlaceholderLoader
from locked_preview.engine.rules import apply_rule, empty_form, redact_generic

logger = logging.getLogger(__name__)


def shape(value: Any) -> Any:
    """Returns the structural skeleton of a value.

    Mappings keep their keys, lists keep their length, and every leaf is
    replaced by None, so two records have the same shape exactly when
    their skeletons compare equal.
    """
    if isinstance(value, Mapping):
        return {k: shape(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [shape(item) for item in value]
    return None


class RecordRedactor:
    """Builds locked records from source records using the role table.

    Fields named in a schema go through their role's rule; any other field
    is redacted generically. Known top-level sections that are absent from
    the source are filled with their empty form.
    """

    def __init__(self, loader: Optional[PlaceholderLoader] = None) -> None:
        self._loader = loader or PlaceholderLoader.get_instance()
        self._token = self._loader.get_placeholder("locked") or LOCK_PLACEHOLDER

    def redact(self, record: Any) -> Dict[str, Any]:
        """Returns a freshly built locked record.

        Args:
            record: Source record; anything other than a mapping counts as empty

        Returns:
            Locked record with the same shape as the source
        """
        if not isinstance(record, Mapping):
            if record is not None:
                logger.warning(
                    "Source record is not a mapping, treating as empty",
                    extra={"record_type": type(record).__name__},
                )
            record = {}

        locked = self._redact_schema(record, ROOT_SCHEMA)

        for field_name, rule in self._loader.get_schema(ROOT_SCHEMA).items():
            if field_name not in locked:
                locked[field_name] = empty_form(rule)

        logger.debug(
            "Record redacted",
            extra={"field_count": len(locked), "source_field_count": len(record)},
        )
        return locked

    def _redact_schema(
        self, record: Mapping[str, Any], schema_name: str
    ) -> Dict[str, Any]:
        schema = self._loader.get_schema(schema_name)
        locked: Dict[str, Any] = {}

        for key, value in record.items():
            rule = schema.get(key)
            if rule is None:
                locked[key] = redact_generic(value, self._token)
            else:
                locked[key] = apply_rule(value, rule, self._redact_schema)

        return locked
