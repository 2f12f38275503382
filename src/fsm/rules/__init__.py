"""
Exports públicos do módulo fsm/rules.

Regras fixas dos menus de entrada.
"""

from fsm.rules.entry import (
    HELP_OPTION_ID,
    LANGUAGE_BUTTONS,
    WEBSITE_KEYWORDS,
    is_website_request,
    language_for_button,
)

__all__ = [
    "HELP_OPTION_ID",
    "LANGUAGE_BUTTONS",
    "WEBSITE_KEYWORDS",
    "is_website_request",
    "language_for_button",
]
