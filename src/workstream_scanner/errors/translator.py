"""Translate technical errors to user-friendly messages."""

import re
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class UserFriendlyError:
    """User-friendly error representation."""
    original_error: Exception
    title: str
    explanation: str
    actions: List[str]
    documentation: Optional[str] = None
    show_technical: bool = False


class ErrorTranslator:
    """Translate technical errors to user-friendly messages."""

    ERROR_PATTERNS = {
        # Scan root problems
        r"scan root.*(does not exist|not a directory)": {
            "title": "Scan root not found",
            "explanation": "The directory to scan does not exist. Scans run against the current working directory unless --root is given.",
            "actions": [
                "Run the scan from the repository root",
                "Or pass the tree explicitly: workstream-scanner mock-replacement --root <path>",
                "Or set WORKSTREAM_ROOT in the environment",
            ],
        },

        # Output problems
        r"cannot write report|output directory": {
            "title": "Report could not be written",
            "explanation": "The report output path is not writable. No partial report was left behind.",
            "actions": [
                "Check permissions on the output directory",
                "Choose another location with --output-dir",
            ],
        },

        # GitHub auth errors
        r"GitHub.*401|Bad credentials": {
            "title": "GitHub authentication failed",
            "explanation": "Your GitHub personal access token is invalid or lacks required permissions.",
            "actions": [
                "Generate new token: https://github.com/settings/tokens (needs 'repo' scope)",
                "Export it as GITHUB_TOKEN or set github.token in the config file",
                "Check token hasn't expired",
            ],
        },

        # gh CLI missing
        r"gh.*not found|No such file or directory: 'gh'": {
            "title": "GitHub CLI not available",
            "explanation": "Label sync with the 'gh' backend needs the GitHub CLI installed and authenticated.",
            "actions": [
                "Install the GitHub CLI: https://cli.github.com",
                "Authenticate: gh auth login",
                "Or use the API backend: sync-labels --backend api",
            ],
        },

        # Rate limiting
        r"rate.*limit|429|too many requests": {
            "title": "API rate limit exceeded",
            "explanation": "Too many requests were made to GitHub. Rate limits reset periodically.",
            "actions": [
                "Wait 15-60 minutes for rate limit to reset",
                "Use an authenticated token for a higher limit",
            ],
        },

        # Config errors
        r"config.*(invalid|not.*found)|repository.*format|no such file.*config": {
            "title": "Configuration problem",
            "explanation": "The scanner configuration file could not be used.",
            "actions": [
                "Compare your file with config/workstream-scanner.yaml.example",
                "Remove the file to fall back to the built-in defaults",
            ],
            "documentation": "config/workstream-scanner.yaml.example",
        },
    }

    def translate(self, error: Exception) -> UserFriendlyError:
        """Convert exception to user-friendly format."""
        error_str = str(error)
        error_type = type(error).__name__
        full_error = f"{error_type}: {error_str}"

        for pattern, translation in self.ERROR_PATTERNS.items():
            if re.search(pattern, full_error, re.IGNORECASE):
                return UserFriendlyError(
                    original_error=error,
                    title=translation["title"],
                    explanation=translation["explanation"],
                    actions=translation["actions"],
                    documentation=translation.get("documentation"),
                    show_technical=False,
                )

        # Fallback for unknown errors
        return UserFriendlyError(
            original_error=error,
            title="Unexpected error",
            explanation=str(error),
            actions=[
                "Re-run with --log-level DEBUG for details",
                "Check the scan log output above",
            ],
            show_technical=True,
        )

    def format_for_cli(self, friendly_error: UserFriendlyError) -> str:
        """Format error for CLI display."""
        output = f"[bold red]{friendly_error.title}[/]\n\n"
        output += f"{friendly_error.explanation}\n\n"

        output += "[bold]How to fix:[/]\n"
        for i, action in enumerate(friendly_error.actions, 1):
            output += f"  {i}. {action}\n"

        if friendly_error.documentation:
            output += f"\n[dim]Learn more: {friendly_error.documentation}[/]"

        if friendly_error.show_technical:
            output += f"\n\n[dim]Technical details:[/]\n[dim]{friendly_error.original_error}[/]"

        return output
