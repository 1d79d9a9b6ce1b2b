#!/usr/bin/env python3
"""
Configuration model and loading.

Configuration can be written as JSON, JSON with comments (JSONC/JSON5) or
YAML. Every key is optional; missing keys take the defaults below.

Organization rules are parsed into a tagged form: a rule either carries a
complete ``LocationPlacement`` (trigger and constraint together) or none.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import json5
import yaml

from .models import FilenameStyle, Severity
from .utils.import_utils import DEFAULT_IMPORT_ALIASES

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (
    "naechste.json",
    "naechste.jsonc",
    "naechste.yaml",
    "naechste.yml",
    ".naechste.config.json",
    ".next-structure-lintrc.json",
)

DEFAULT_MAX_NESTING_DEPTH = 3


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration."""


class RuleKind(Enum):
    """What an organization rule can check."""
    UNCONDITIONAL = "unconditional"
    SIBLING_ONLY = "sibling_only"
    LOCATION_CONDITIONAL = "location_conditional"


@dataclass(frozen=True)
class MatchPattern:
    """Include glob plus exclude globs, evaluated on root-relative paths."""
    glob: str
    exclude_glob: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SiblingExact:
    """Companion file with an exact name next to the matched file."""
    name: str

    def to_dict(self) -> Dict:
        return {"kind": "sibling_exact", "name": self.name}


@dataclass(frozen=True)
class SiblingGlob:
    """At least one entry next to the matched file must match the glob."""
    glob: str

    def to_dict(self) -> Dict:
        return {"kind": "sibling_glob", "glob": self.glob}


Requirement = Union[SiblingExact, SiblingGlob]


@dataclass(frozen=True)
class ImportTrigger:
    """When a file is imported by a matching importer with a matching specifier."""
    importer_glob: str
    import_path_matches: Tuple[str, ...]


@dataclass(frozen=True)
class LocationConstraint:
    """Directories a triggered file must live under."""
    must_be_under: Tuple[str, ...]
    message: Optional[str] = None


@dataclass(frozen=True)
class LocationPlacement:
    """Trigger and constraint of a conditional placement rule."""
    trigger: ImportTrigger
    constraint: LocationConstraint


@dataclass(frozen=True)
class OrganizationRule:
    """A user-configured file organization check."""
    id: str
    match: MatchPattern
    require: Tuple[Requirement, ...] = ()
    placement: Optional[LocationPlacement] = None
    description: Optional[str] = None

    @property
    def kind(self) -> RuleKind:
        if self.placement is not None:
            return RuleKind.LOCATION_CONDITIONAL
        if self.require:
            return RuleKind.SIBLING_ONLY
        return RuleKind.UNCONDITIONAL

    @property
    def rule_name(self) -> str:
        """Namespaced id used on diagnostics."""
        return f"file-organization:{self.id}"

    def to_dict(self) -> Dict:
        result: Dict[str, Any] = {
            "id": self.id,
            "match": {"glob": self.match.glob, "exclude_glob": list(self.match.exclude_glob)},
            "require": [r.to_dict() for r in self.require],
        }
        if self.description:
            result["description"] = self.description
        if self.placement:
            result["when_imported_by"] = {
                "importer_glob": self.placement.trigger.importer_glob,
                "import_path_matches": list(self.placement.trigger.import_path_matches),
            }
            result["enforce_location"] = {"must_be_under": list(self.placement.constraint.must_be_under)}
            if self.placement.constraint.message:
                result["enforce_location"]["message"] = self.placement.constraint.message
        return result


@dataclass
class CompanionFilePatterns:
    """Extra companion file globs checked by the missing-companion-files rule."""
    integration_tests: List[str] = field(default_factory=list)
    page_user_scenarios: List[str] = field(default_factory=list)
    custom: Dict[str, List[str]] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.integration_tests or self.page_user_scenarios or self.custom)


@dataclass
class RuleOptions:
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    filename_style: FilenameStyle = FilenameStyle.KEBAB_CASE
    require_test_files: bool = False
    require_story_files: bool = False
    companion_file_patterns: CompanionFilePatterns = field(default_factory=CompanionFilePatterns)
    file_organization_checks: List[OrganizationRule] = field(default_factory=list)


@dataclass
class RuleConfig:
    severity: Severity = Severity.WARN
    options: RuleOptions = field(default_factory=RuleOptions)


@dataclass
class Rules:
    server_side_exports: RuleConfig = field(default_factory=RuleConfig)
    component_nesting_depth: RuleConfig = field(default_factory=RuleConfig)
    filename_style_consistency: RuleConfig = field(default_factory=RuleConfig)
    missing_companion_files: RuleConfig = field(default_factory=RuleConfig)
    file_organization: RuleConfig = field(default_factory=RuleConfig)


RULE_NAMES = (
    "server_side_exports",
    "component_nesting_depth",
    "filename_style_consistency",
    "missing_companion_files",
    "file_organization",
)


@dataclass
class Config:
    rules: Rules = field(default_factory=Rules)
    import_aliases: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_IMPORT_ALIASES))

    @classmethod
    def from_dict(cls, data: Any) -> "Config":
        """Build a Config from parsed configuration data."""
        if data is None:
            return cls()
        data = _expect_mapping(data, "configuration")

        rules_data = _expect_mapping(data.get("rules", {}), "rules")
        rules = Rules()
        for rule_name in RULE_NAMES:
            if rule_name in rules_data:
                setattr(rules, rule_name, _parse_rule_config(rules_data[rule_name], rule_name))

        config = cls(rules=rules)
        if "import_aliases" in data:
            aliases = _expect_mapping(data["import_aliases"], "import_aliases")
            config.import_aliases = {
                _expect_str(prefix, "import_aliases"): _expect_str(target, f"import_aliases.{prefix}")
                for prefix, target in aliases.items()
            }
        return config

    def to_dict(self) -> Dict:
        """Serialize to the on-disk configuration shape."""
        rules = {}
        for rule_name in RULE_NAMES:
            rule_config: RuleConfig = getattr(self.rules, rule_name)
            options = rule_config.options
            rules[rule_name] = {
                "severity": rule_config.severity.value,
                "options": {
                    "max_nesting_depth": options.max_nesting_depth,
                    "filename_style": options.filename_style.value,
                    "require_test_files": options.require_test_files,
                    "require_story_files": options.require_story_files,
                    "companion_file_patterns": {
                        "integration_tests": list(options.companion_file_patterns.integration_tests),
                        "page_user_scenarios": list(options.companion_file_patterns.page_user_scenarios),
                        "custom": dict(options.companion_file_patterns.custom),
                    },
                    "file_organization_checks": [c.to_dict() for c in options.file_organization_checks],
                },
            }
        return {"rules": rules, "import_aliases": dict(self.import_aliases)}


def _expect_mapping(value: Any, where: str) -> Dict:
    if not isinstance(value, dict):
        raise ConfigError(f"'{where}' must be a mapping, got {type(value).__name__}")
    return value


def _expect_list(value: Any, where: str) -> List:
    if not isinstance(value, list):
        raise ConfigError(f"'{where}' must be a list, got {type(value).__name__}")
    return value


def _expect_str(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"'{where}' must be a string, got {type(value).__name__}")
    return value


def _expect_bool(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{where}' must be true or false")
    return value


def _str_tuple(value: Any, where: str) -> Tuple[str, ...]:
    return tuple(_expect_str(item, f"{where}[{i}]") for i, item in enumerate(_expect_list(value, where)))


def _parse_enum(enum_cls, value: Any, where: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"'{where}' must be one of: {allowed} (got {value!r})") from None


def _parse_rule_config(data: Any, rule_name: str) -> RuleConfig:
    data = _expect_mapping(data, f"rules.{rule_name}")
    rule_config = RuleConfig()
    if "severity" in data:
        rule_config.severity = _parse_enum(Severity, data["severity"], f"rules.{rule_name}.severity")
    if "options" in data:
        rule_config.options = _parse_rule_options(data["options"], f"rules.{rule_name}.options")
    return rule_config


def _parse_rule_options(data: Any, where: str) -> RuleOptions:
    data = _expect_mapping(data, where)
    options = RuleOptions()

    if "max_nesting_depth" in data:
        depth = data["max_nesting_depth"]
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
            raise ConfigError(f"'{where}.max_nesting_depth' must be a non-negative integer")
        options.max_nesting_depth = depth
    if "filename_style" in data:
        options.filename_style = _parse_enum(FilenameStyle, data["filename_style"], f"{where}.filename_style")
    if "require_test_files" in data:
        options.require_test_files = _expect_bool(data["require_test_files"], f"{where}.require_test_files")
    if "require_story_files" in data:
        options.require_story_files = _expect_bool(data["require_story_files"], f"{where}.require_story_files")
    if "companion_file_patterns" in data:
        options.companion_file_patterns = _parse_companion_patterns(
            data["companion_file_patterns"], f"{where}.companion_file_patterns"
        )
    if "file_organization_checks" in data:
        checks = _expect_list(data["file_organization_checks"], f"{where}.file_organization_checks")
        options.file_organization_checks = _parse_organization_rules(checks, f"{where}.file_organization_checks")

    return options


def _parse_companion_patterns(data: Any, where: str) -> CompanionFilePatterns:
    data = _expect_mapping(data, where)
    custom = {
        _expect_str(category, f"{where}.custom"): list(_str_tuple(globs, f"{where}.custom.{category}"))
        for category, globs in _expect_mapping(data.get("custom", {}), f"{where}.custom").items()
    }
    return CompanionFilePatterns(
        integration_tests=list(_str_tuple(data.get("integration_tests", []), f"{where}.integration_tests")),
        page_user_scenarios=list(_str_tuple(data.get("page_user_scenarios", []), f"{where}.page_user_scenarios")),
        custom=custom,
    )


def _parse_organization_rules(checks: List, where: str) -> List[OrganizationRule]:
    seen_ids = set()
    rules = []
    for idx, check_data in enumerate(checks):
        rule = parse_organization_rule(check_data, f"{where}[{idx}]")
        if rule.id in seen_ids:
            raise ConfigError(f"Duplicate file organization check id '{rule.id}'")
        seen_ids.add(rule.id)
        rules.append(rule)
    return rules


def parse_organization_rule(data: Any, where: str = "file_organization_checks") -> OrganizationRule:
    """Parse one organization rule, selecting its kind at load time."""
    data = _expect_mapping(data, where)

    rule_id = data.get("id")
    if not isinstance(rule_id, str) or not rule_id.strip():
        raise ConfigError(f"'{where}' is missing a non-empty 'id'")
    where = f"file organization check '{rule_id}'"

    if "match" not in data:
        raise ConfigError(f"{where} is missing 'match'")
    match_data = _expect_mapping(data["match"], f"{where}.match")
    match = MatchPattern(
        glob=_expect_str(match_data.get("glob"), f"{where}.match.glob"),
        exclude_glob=_str_tuple(match_data.get("exclude_glob", []), f"{where}.match.exclude_glob"),
    )

    require = tuple(
        _parse_requirement(item, f"{where}.require[{i}]")
        for i, item in enumerate(_expect_list(data.get("require", []), f"{where}.require"))
    )

    trigger_data = data.get("when_imported_by")
    constraint_data = data.get("enforce_location")
    placement = None
    if trigger_data is not None and constraint_data is not None:
        trigger_data = _expect_mapping(trigger_data, f"{where}.when_imported_by")
        constraint_data = _expect_mapping(constraint_data, f"{where}.enforce_location")
        message = constraint_data.get("message")
        placement = LocationPlacement(
            trigger=ImportTrigger(
                importer_glob=_expect_str(trigger_data.get("importer_glob"), f"{where}.when_imported_by.importer_glob"),
                import_path_matches=_str_tuple(
                    trigger_data.get("import_path_matches", []), f"{where}.when_imported_by.import_path_matches"
                ),
            ),
            constraint=LocationConstraint(
                must_be_under=_str_tuple(
                    constraint_data.get("must_be_under", []), f"{where}.enforce_location.must_be_under"
                ),
                message=_expect_str(message, f"{where}.enforce_location.message") if message is not None else None,
            ),
        )
    elif trigger_data is not None or constraint_data is not None:
        present = "when_imported_by" if trigger_data is not None else "enforce_location"
        logger.warning(
            "%s sets '%s' without its counterpart; location enforcement needs both "
            "'when_imported_by' and 'enforce_location' and is disabled for this check",
            where, present
        )

    description = data.get("description")
    return OrganizationRule(
        id=rule_id,
        match=match,
        require=require,
        placement=placement,
        description=_expect_str(description, f"{where}.description") if description is not None else None,
    )


def _parse_requirement(data: Any, where: str) -> Requirement:
    data = _expect_mapping(data, where)
    kind = data.get("kind")
    if kind == "sibling_exact":
        return SiblingExact(name=_expect_str(data.get("name"), f"{where}.name"))
    if kind == "sibling_glob":
        return SiblingGlob(glob=_expect_str(data.get("glob"), f"{where}.glob"))
    raise ConfigError(f"'{where}.kind' must be 'sibling_exact' or 'sibling_glob' (got {kind!r})")


def _parse_text(contents: str, extension: str) -> Any:
    if extension in ("yaml", "yml"):
        return yaml.safe_load(contents)
    if extension == "jsonc":
        return json5.loads(contents)
    if extension in ("json", ""):
        # Strict JSON first, then JSON5 to allow comments.
        try:
            return json.loads(contents)
        except json.JSONDecodeError:
            return json5.loads(contents)

    try:
        return json.loads(contents)
    except json.JSONDecodeError:
        pass
    try:
        return json5.loads(contents)
    except ValueError:
        return yaml.safe_load(contents)


def load_config(path: Path) -> Config:
    """Load configuration from a file, choosing the format by extension."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            contents = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e

    extension = path.suffix.lstrip(".").lower()
    try:
        data = _parse_text(contents, extension)
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not parse config file {path}: {e}") from e

    config = Config.from_dict(data)
    logger.debug("Loaded configuration from %s", path)
    return config


def find_config_file(project_dir: Path) -> Optional[Path]:
    """Find the first known config file in the project directory."""
    for name in CONFIG_FILE_NAMES:
        candidate = Path(project_dir) / name
        if candidate.is_file():
            return candidate
    return None


def write_default_config(path: Path, force: bool = False) -> Path:
    """Write the default configuration as JSON."""
    path = Path(path)
    if path.exists() and not force:
        raise ConfigError(f"{path} already exists (use --force to overwrite)")

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(Config().to_dict(), f, indent=2)
        f.write("\n")
    return path
