"""Keyword heuristics that suggest a next action for each inbox task.

Rules are evaluated in table order and the first match wins, so a comment
mentioning both "review" and "help" is always a review request. Keywords
are matched against lower-cased plain text; add a language by extending a
rule's keyword tuple.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from productive_mcp.text import strip_markup

if TYPE_CHECKING:
    from productive_mcp.inbox import InboxEntry

UNKNOWN_AUTHOR = "Someone"


@dataclass(frozen=True)
class ActionRule:
    """A keyword rule with a full template and a terse one for the terminal."""

    name: str
    keywords: tuple[str, ...]
    template: str
    brief: str | None = None

    def matches(self, text: str) -> bool:
        return any(k in text for k in self.keywords)

    def render(self, author: str, brief: bool = False) -> str:
        template = self.brief if brief and self.brief is not None else self.template
        return template.format(author=author)


# A comment is only classified when it asks something or mentions someone.
COMMENT_TRIGGER = ActionRule("trigger", ("?", "@"), "")

COMMENT_RULES: tuple[ActionRule, ...] = (
    ActionRule(
        "close",
        ("close", "chiudi"),
        "{author} is asking about closing this task. Review and respond.",
        "{author} is asking about closing this task.",
    ),
    ActionRule("review", ("review", "controlla"), "Review requested by {author}."),
    ActionRule("help", ("help", "aiut"), "{author} is asking for help."),
    ActionRule("publish", ("publish", "pubblica"), "{author} needs you to publish something."),
    ActionRule("question", ("?",), "{author} asked a question. Respond.", "{author} asked a question."),
    ActionRule("mention", ("@",), "You were mentioned. Check and respond.", "You were mentioned."),
)

# Only consulted for tasks without any comment.
TITLE_RULES: tuple[ActionRule, ...] = (
    ActionRule("critical", ("critical", "⚠️"), "CRITICAL bug needs immediate attention."),
    ActionRule("bug", ("bug",), "Bug to investigate."),
)


def classify(
    title: str,
    comment_body: str | None = None,
    author: str | None = None,
    brief: bool = False,
) -> str | None:
    """Return the suggestion text for one task, or None."""
    if comment_body is not None:
        text = strip_markup(comment_body).lower()
        if not COMMENT_TRIGGER.matches(text):
            return None
        for rule in COMMENT_RULES:
            if rule.matches(text):
                return rule.render(author or UNKNOWN_AUTHOR, brief)
        return None

    lowered = title.lower()
    for rule in TITLE_RULES:
        if rule.matches(lowered):
            return rule.render(author or UNKNOWN_AUTHOR, brief)
    return None


def suggest_actions(entries: Iterable["InboxEntry"], brief: bool = False) -> list[str]:
    """One ``#N - ...`` line per entry that has a suggestion, in inbox order."""
    lines = []
    for entry in entries:
        comment_body = (entry.comment.attr("body") or "") if entry.comment else None
        suggestion = classify(entry.task.attr("title") or "", comment_body, entry.author_name, brief)
        if suggestion:
            lines.append(f"#{entry.position} - {suggestion}")
    return lines
