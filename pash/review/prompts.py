from __future__ import annotations

from pash.models import RuleSet

RULES_PROMPT_TEMPLATE = (
    "You are an expert code reviewer performing a pre-push code review."
    " Please review the following git diff according to the specific rules and guidelines provided below.\n"
    "\n"
    "## Review Rules and Guidelines:\n"
    "{rules}\n"
    "\n"
    "## Instructions:\n"
    "- Follow the rules and guidelines above when reviewing the code\n"
    "- Pay special attention to security issues like exposed secrets, API keys, or credentials\n"
    "- Check for code quality issues as specified in the rules\n"
    "- Provide specific, actionable feedback\n"
    "- If you find any critical security issues, clearly state them and advise immediate action\n"
    "\n"
    "Here is the diff to review:\n"
    "```diff\n"
    "{diff}\n"
    "```"
)

DEFAULT_PROMPT_TEMPLATE = (
    "You are an expert security engineer performing a pre-push code review."
    " Your primary goal is to identify any secrets, API keys, credentials, or exposed environment variables."
    " Also, check for other critical issues like major bugs or logic flaws.\n"
    "\n"
    "Analyze the following git diff and provide your feedback."
    " If you find any secrets, state it clearly and advise the user to remove them immediately.\n"
    "\n"
    "Here is the diff:\n"
    "```diff\n"
    "{diff}\n"
    "```"
)


def build_prompt(diff: str, rules: RuleSet) -> str:
    """Combine the diff with the rule contents, or the default security instructions."""
    if rules:
        return RULES_PROMPT_TEMPLATE.format(rules="\n" + rules.combined(), diff=diff)
    return DEFAULT_PROMPT_TEMPLATE.format(diff=diff)
