"""
Classifies generation failures into user-facing guidance.

Operates on the error text returned by the API (and, when available, the raw
model reply) so it can run on either side of the HTTP boundary.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Union

AI_LIMITATION_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"I cannot fully generate",
        r"My current capabilities do not allow",
        r"I'm unable to create",
        r"This request is too complex",
        r"I cannot provide",
        r"I'm not able to generate",
        r"This exceeds my capabilities",
        r"I cannot complete this request",
        r"I'm unable to process",
        r"This is beyond my current abilities",
    )
]

PARSING_MARKERS = ("JSON", "parse", "Invalid workflow structure", "SyntaxError")
NETWORK_MARKERS = ("fetch", "network", "timeout", "Failed to generate workflow")

AI_LIMITATION_MESSAGE = (
    "The AI encountered a complex request and couldn't generate a valid workflow. "
    "Please try simplifying your description or breaking it down into smaller steps. "
    "For example, focus on one specific automation at a time."
)
PARSING_MESSAGE = (
    "The AI generated an invalid workflow format. Please try rephrasing your request "
    "with more specific details about the services and actions you want to automate."
)
NETWORK_MESSAGE = (
    "There was a connection issue while generating your workflow. "
    "Please check your internet connection and try again."
)
GENERIC_MESSAGE = (
    "We encountered an issue generating your workflow. Please try rephrasing your request "
    "or provide more specific details about your automation needs."
)

AI_LIMITATION_SUGGESTIONS = [
    "Break down complex automations into smaller, individual workflows",
    "Be more specific about the services you want to connect (e.g., Gmail, Slack, Google Sheets)",
    "Describe the exact trigger and action you want (e.g., 'when I receive an email' → 'send a Slack message')",
    "Try using one of the example prompts from the sidebar",
]
PARSING_SUGGESTIONS = [
    "Use simpler language to describe your automation",
    "Mention specific service names (Gmail, Slack, Airtable, etc.)",
    "Describe a single workflow instead of multiple automations",
    "Check out the templates for inspiration",
]
GENERAL_SUGGESTIONS = [
    "Try rephrasing your request with different words",
    "Be more specific about what triggers the automation",
    "Mention the exact services you want to connect",
    "Start with a simpler automation and build up complexity",
]


@dataclass
class AIErrorAnalysis:
    is_ai_limitation: bool
    is_parsing_error: bool
    is_network_error: bool
    user_friendly_message: str
    technical_error: str


def analyze_ai_error(error: Union[BaseException, str, None], ai_response: Optional[str] = None) -> AIErrorAnalysis:
    """
    Sorts an error into AI-limitation, parsing, network or generic.

    Refusal wording is searched in both the error text and the raw reply;
    the other categories only look at the error text (case-sensitive).
    When several match, the first of that order picks the message.
    """
    message = str(error) if error is not None else ""
    response_text = ai_response or ""

    is_ai_limitation = any(p.search(response_text) or p.search(message) for p in AI_LIMITATION_PATTERNS)
    is_parsing_error = any(marker in message for marker in PARSING_MARKERS)
    is_network_error = any(marker in message for marker in NETWORK_MARKERS)

    if is_ai_limitation:
        friendly = AI_LIMITATION_MESSAGE
    elif is_parsing_error:
        friendly = PARSING_MESSAGE
    elif is_network_error:
        friendly = NETWORK_MESSAGE
    else:
        friendly = GENERIC_MESSAGE

    return AIErrorAnalysis(
        is_ai_limitation=is_ai_limitation,
        is_parsing_error=is_parsing_error,
        is_network_error=is_network_error,
        user_friendly_message=friendly,
        technical_error=message,
    )


def get_helpful_suggestions(analysis: AIErrorAnalysis) -> List[str]:
    if analysis.is_ai_limitation:
        return list(AI_LIMITATION_SUGGESTIONS)
    if analysis.is_parsing_error:
        return list(PARSING_SUGGESTIONS)
    return list(GENERAL_SUGGESTIONS)
