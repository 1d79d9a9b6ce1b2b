"""Structure linting rules."""

from .server_export_rules import ServerExportRuleChecker
from .nesting_rules import NestingDepthRuleChecker
from .filename_rules import FilenameStyleRuleChecker
from .companion_rules import CompanionFileRuleChecker
from .organization_rules import OrganizationRuleChecker

__all__ = [
    "ServerExportRuleChecker",
    "NestingDepthRuleChecker",
    "FilenameStyleRuleChecker",
    "CompanionFileRuleChecker",
    "OrganizationRuleChecker",
]
