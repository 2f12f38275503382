"""
Passos canônicos da conversa de campanha.

Cada passo corresponde a um template (flow_type, language, step_key).
Passos desconhecidos vindos do catálogo de templates continuam válidos
como strings; este enum cobre apenas os passos com regra fixa.
"""

from enum import StrEnum

# Único tipo de fluxo de conversa ativo
CAMPAIGN_FLOW_TYPE = "campaign"


class Step(StrEnum):
    """
    Passos com semântica fixa na máquina de conversa.

    Menus:
        - CAMPAIGN_ENTRY: Primeira mensagem, escolha de idioma
        - MAIN_MENU: Menu principal (Flows e ajuda)
        - HELP_SUBMENU: Submenu de suporte

    Cadeias de texto (survey, callback, service, issue) terminam em
    passos de conclusão que materializam registros de negócio.
    """

    CAMPAIGN_ENTRY = "campaign_entry"
    MAIN_MENU = "main_menu"
    HELP_SUBMENU = "help_submenu"

    SURVEY_NAME = "survey_name"
    SURVEY_MOBILE = "survey_mobile"
    SURVEY_ADDRESS = "survey_address"
    SURVEY_VILLAGE = "survey_village"
    SURVEY_DATE = "survey_date"
    SURVEY_TIME = "survey_time"
    SURVEY_COMPLETE = "survey_complete"

    CALLBACK_NAME = "callback_name"
    CALLBACK_MOBILE = "callback_mobile"
    CALLBACK_TIME = "callback_time"
    CALLBACK_COMPLETE = "callback_complete"

    SERVICE_NAME = "service_name"
    SERVICE_MOBILE = "service_mobile"
    SERVICE_ADDRESS = "service_address"
    SERVICE_DESCRIPTION = "service_description"
    SERVICE_COMPLETE = "service_complete"

    ISSUE_NAME = "issue_name"
    ISSUE_MOBILE = "issue_mobile"
    ISSUE_DESCRIPTION = "issue_description"
    ISSUE_COMPLETE = "issue_complete"

    WEBSITE_COMPLETE = "website_complete"

    def __str__(self) -> str:
        return self.value


class Language(StrEnum):
    """Idiomas suportados pelo catálogo de templates."""

    EN = "en"
    HI = "hi"


DEFAULT_LANGUAGE: Language = Language.EN

# Passo inicial de toda conversa nova (e de todo restart)
INITIAL_STEP: Step = Step.CAMPAIGN_ENTRY

# Passos terminais: entrar em um deles gera registro uma única vez
COMPLETION_STEPS: frozenset[Step] = frozenset({
    Step.SURVEY_COMPLETE,
    Step.CALLBACK_COMPLETE,
    Step.SERVICE_COMPLETE,
    Step.ISSUE_COMPLETE,
    Step.WEBSITE_COMPLETE,
})


def is_completion_step(step: str) -> bool:
    """Verifica se o passo é de conclusão."""
    return step in COMPLETION_STEPS


def parse_language(value: str | None) -> Language | None:
    """Converte string de idioma para Language (None se ausente/inválido)."""
    if not value:
        return None
    try:
        return Language(value.strip().lower())
    except ValueError:
        return None
