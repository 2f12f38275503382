"""
Regras fixas dos menus de entrada.

`campaign_entry` e `main_menu` não seguem o template: aceitam apenas
um conjunto fixo de entradas, declarado aqui.
"""

from fsm.states.steps import Language

# Resposta livre que leva direto ao passo website_complete
WEBSITE_KEYWORDS: frozenset[str] = frozenset({"w", "website", "वेबसाइट"})

# Botões de idioma aceitos em campaign_entry
LANGUAGE_BUTTONS: dict[str, Language] = {
    "hindi": Language.HI,
    "english": Language.EN,
}

# Único botão de main_menu tratado pela máquina (Flows são interceptados antes)
HELP_OPTION_ID = "help"


def is_website_request(content: str | None) -> bool:
    """Verifica se o texto pede o link do site (case-insensitive)."""
    if not content:
        return False
    return content.strip().lower() in WEBSITE_KEYWORDS


def language_for_button(button_id: str | None) -> Language | None:
    """Retorna o idioma do botão de escolha (None se não for botão de idioma)."""
    if not button_id:
        return None
    return LANGUAGE_BUTTONS.get(button_id)
