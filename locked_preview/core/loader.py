# locked_preview/core/loader.py

"""Loader for the declarative role -> replacement rule table."""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from locked_preview.core.definitions import ROOT_SCHEMA, RuleKind
from locked_preview.core.domain import ReplacementRule
from locked_preview.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TABLE_PATH = Path(__file__).parent / "placeholders.yaml"

# Kinds whose rule must carry a value
_VALUED_KINDS = frozenset({RuleKind.MASK, RuleKind.RESET, RuleKind.TOKENS})


class PlaceholderLoader:
    """Loads placeholders, roles and schemas from a YAML table.

    The default table is loaded once and shared for the application
    lifecycle through ``get_instance``. Other tables can be loaded by
    constructing the loader directly with a path.
    """

    _instance: Optional["PlaceholderLoader"] = None
    _lock = threading.Lock()

    def __init__(self, config_path: Optional[Union[str, Path]] = None) -> None:
        self.config_path = Path(config_path) if config_path else DEFAULT_TABLE_PATH
        self._placeholders: Dict[str, str] = {}
        self._roles: Dict[str, ReplacementRule] = {}
        self._schemas: Dict[str, Dict[str, ReplacementRule]] = {}
        self._load_config()

    @classmethod
    def get_instance(
        cls, config_path: Optional[Union[str, Path]] = None
    ) -> "PlaceholderLoader":
        """Returns the shared loader, creating it on first use.

        The path only matters on first use; call ``reset_instance`` to
        switch tables.
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls(config_path)
                    return cls._instance

        requested = Path(config_path) if config_path else DEFAULT_TABLE_PATH
        if requested != cls._instance.config_path:
            logger.warning(
                "Shared replacement table already loaded, ignoring requested path",
                extra={
                    "loaded_path": str(cls._instance.config_path),
                    "requested_path": str(requested),
                },
            )
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drops the shared loader so the next call reloads the table."""
        with cls._lock:
            cls._instance = None

    def _load_config(self) -> None:
        """Reads and validates the table.

        Raises:
            ConfigurationError: If the file is missing, invalid, or inconsistent.
        """
        if not self.config_path.exists():
            error_msg = f"Replacement table not found: {self.config_path}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}", exc_info=True)
            raise ConfigurationError(
                f"Failed to parse {self.config_path.name}: {e}"
            ) from e

        if not isinstance(config, dict) or not config:
            raise ConfigurationError("Replacement table is empty or invalid")

        missing = [s for s in ("placeholders", "roles", "schemas") if s not in config]
        if missing:
            error_msg = f"Missing required table sections: {missing}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        self._placeholders = {
            str(k): str(v) for k, v in (config["placeholders"] or {}).items()
        }
        self._roles = {
            str(role): self._parse_rule(str(role), entry)
            for role, entry in (config["roles"] or {}).items()
        }
        self._schemas = self._parse_schemas(config["schemas"] or {})
        self._validate_references()

        logger.info(
            "Replacement table loaded successfully",
            extra={
                "config_path": str(self.config_path),
                "role_count": len(self._roles),
                "schema_count": len(self._schemas),
            },
        )

    def _resolve_value(self, role: str, value: Any) -> Any:
        """Expands ``@name`` references into placeholder literals."""
        if isinstance(value, str) and value.startswith("@"):
            name = value[1:]
            if name not in self._placeholders:
                raise ConfigurationError(
                    f"Role '{role}' references unknown placeholder '{name}'"
                )
            return self._placeholders[name]
        return value

    def _parse_rule(self, role: str, entry: Any) -> ReplacementRule:
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Role '{role}' must be a mapping")

        kind = entry.get("kind")
        if not isinstance(kind, str) or kind not in RuleKind.ALL:
            raise ConfigurationError(f"Role '{role}' has unknown kind: {kind!r}")

        if kind in _VALUED_KINDS and "value" not in entry:
            raise ConfigurationError(f"Role '{role}' of kind '{kind}' needs a value")

        if kind in RuleKind.NESTED and not entry.get("schema"):
            raise ConfigurationError(f"Role '{role}' of kind '{kind}' needs a schema")

        return ReplacementRule(
            role=role,
            kind=kind,
            value=self._resolve_value(role, entry.get("value")),
            schema=entry.get("schema"),
        )

    def _parse_schemas(
        self, raw: Mapping[str, Any]
    ) -> Dict[str, Dict[str, ReplacementRule]]:
        schemas: Dict[str, Dict[str, ReplacementRule]] = {}

        for schema_name, fields in raw.items():
            if not isinstance(fields, dict):
                raise ConfigurationError(f"Schema '{schema_name}' must be a mapping")

            resolved: Dict[str, ReplacementRule] = {}
            for field_name, role in fields.items():
                if not isinstance(role, str) or role not in self._roles:
                    raise ConfigurationError(
                        f"Field '{schema_name}.{field_name}' uses unknown role '{role}'"
                    )
                resolved[str(field_name)] = self._roles[role]
            schemas[str(schema_name)] = resolved

        return schemas

    def _validate_references(self) -> None:
        """Ensures nested roles point at defined schemas and the root exists."""
        if ROOT_SCHEMA not in self._schemas:
            raise ConfigurationError(f"Missing root schema '{ROOT_SCHEMA}'")

        for rule in self._roles.values():
            if rule.kind in RuleKind.NESTED and rule.schema not in self._schemas:
                raise ConfigurationError(
                    f"Role '{rule.role}' references unknown schema '{rule.schema}'"
                )

    def get_rule(self, role: str) -> ReplacementRule:
        """Returns the rule for a role.

        Raises:
            ConfigurationError: If the role is not in the table.
        """
        try:
            return self._roles[role]
        except KeyError:
            raise ConfigurationError(f"Unknown role: {role}") from None

    def get_schema(self, schema_name: str) -> Dict[str, ReplacementRule]:
        """Returns the field -> rule mapping for a schema.

        Raises:
            ConfigurationError: If the schema is not in the table.
        """
        try:
            return self._schemas[schema_name]
        except KeyError:
            raise ConfigurationError(f"Unknown schema: {schema_name}") from None

    def get_placeholder(self, name: str) -> str:
        """Returns a named placeholder literal, empty string if undefined."""
        return self._placeholders.get(name, "")

    @property
    def roles(self) -> Dict[str, ReplacementRule]:
        return dict(self._roles)

    @property
    def schema_names(self) -> list:
        return list(self._schemas)
