from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from pash.errors import IOFailureError, RuleError
from pash.rules.loader import LOCAL_PASH_DIR, LOCAL_RULES_DIR

logger = logging.getLogger(__name__)

GITIGNORE_ENTRY = f"{LOCAL_PASH_DIR.as_posix()}/"

DEFAULT_RULES = {
    "security.md": """# Security Review Rules

## Critical Issues to Check
- **API Keys & Secrets**: Look for hardcoded API keys, passwords, tokens, or any sensitive credentials
- **Environment Variables**: Check for exposed environment variables that might contain secrets
- **Database Credentials**: Look for database connection strings or credentials
- **Private Keys**: Check for private keys, certificates, or cryptographic material
- **URLs with Credentials**: Look for URLs containing usernames/passwords

## Security Best Practices
- Ensure all secrets are stored in environment variables or secure vaults
- Check for proper input validation and sanitization
- Look for potential SQL injection vulnerabilities
- Verify proper authentication and authorization checks
""",
    "code-quality.md": """# Code Quality Review Rules

## Code Structure
- **Function Length**: Flag functions that are too long (>50 lines)
- **Code Duplication**: Look for repeated code blocks
- **Naming Conventions**: Check for clear, descriptive variable and function names
- **Comments**: Ensure complex logic is properly documented

## Best Practices
- Check for proper error handling
- Look for unused variables or imports
- Verify consistent code formatting
- Check for proper logging practices
""",
    "project-specific.md": """# Project-Specific Review Rules

## Custom Rules for This Project
Add your project-specific review rules here. Examples:

- **Framework-specific patterns**: Check for proper use of your chosen framework
- **Business logic**: Verify business rules are correctly implemented
- **Performance**: Look for potential performance issues specific to your domain
- **Dependencies**: Check for proper dependency management

## Team Conventions
- Add your team's coding conventions here
- Include any specific patterns or anti-patterns for your project
""",
}

NEW_RULE_TEMPLATE = """# {name} Review Rules

## Description
Add a description of what this rule checks for.

## Rules
- Add your specific rules here
- Use bullet points for clarity
- Be specific about what to look for

## Examples
```
// Good example
// Add examples of good code patterns

// Bad example
// Add examples of patterns to avoid
```
"""


def init_rules(root: str | Path = ".") -> Path:
    """Write the default rule templates and ignore the local PASH directory."""
    root = Path(root)
    rules_dir = root / LOCAL_RULES_DIR
    try:
        rules_dir.mkdir(parents=True, exist_ok=True)
        for name, content in DEFAULT_RULES.items():
            (rules_dir / name).write_text(content, encoding="utf-8")
        _ensure_gitignore_entry(root / ".gitignore")
    except OSError as exc:
        raise IOFailureError(f"Failed to initialize rules in {rules_dir}: {exc}") from exc
    return rules_dir


def _ensure_gitignore_entry(gitignore: Path) -> None:
    existing = gitignore.read_text(encoding="utf-8") if gitignore.exists() else ""
    if any(line.startswith(GITIGNORE_ENTRY) for line in existing.splitlines()):
        return
    with gitignore.open("a", encoding="utf-8") as handle:
        handle.write(f"\n# PASH local configuration\n{GITIGNORE_ENTRY}\n")
    logger.debug("Added %s to %s", GITIGNORE_ENTRY, gitignore)


def list_rules(root: str | Path = ".") -> Optional[List[str]]:
    """Rule file names, or None when the rules directory does not exist."""
    rules_dir = Path(root) / LOCAL_RULES_DIR
    if not rules_dir.is_dir():
        return None
    return sorted(path.name for path in rules_dir.glob("*.md") if path.is_file())


def add_rule(root: str | Path, name: Optional[str]) -> Path:
    if not name or not name.strip():
        raise RuleError("Please specify a rule name. Usage: pash add-rule <rule-name>")

    name = name.strip()
    rules_dir = Path(root) / LOCAL_RULES_DIR
    rule_file = rules_dir / f"{name}.md"
    if rule_file.exists():
        raise RuleError(f"Rule file {rule_file} already exists.")

    try:
        rules_dir.mkdir(parents=True, exist_ok=True)
        rule_file.write_text(NEW_RULE_TEMPLATE.format(name=name), encoding="utf-8")
    except OSError as exc:
        raise IOFailureError(f"Failed to create rule file {rule_file}: {exc}") from exc
    return rule_file
