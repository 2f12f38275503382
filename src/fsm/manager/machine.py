"""
Função de transição da conversa de campanha.

Decide, para o passo atual e a entrada recebida, se a conversa avança
(`Advance`) ou volta ao início (`Restart`). Não faz IO: o chamador
carrega o template do passo e persiste o resultado.

Regras:
    - campaign_entry: apenas botões hindi/english (→ main_menu) ou
      texto "w"/"website"/"वेबसाइट" (→ website_complete)
    - main_menu: apenas "help" (→ help_submenu)
    - passos de conclusão: qualquer entrada reinicia
    - demais passos: botão/lista seguem o template; texto segue
      a tabela fixa de sucessores
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fsm.rules.entry import HELP_OPTION_ID, is_website_request, language_for_button
from fsm.states.steps import Step, is_completion_step
from fsm.transitions.rules import get_text_successor
from fsm.types.transition import (
    Advance,
    InputKind,
    Restart,
    RestartReason,
    StepOption,
    TransitionInput,
    TransitionOutcome,
)

if TYPE_CHECKING:
    from collections.abc import Sequence


def decide_transition(
    current_step: str,
    incoming: TransitionInput,
    options: Sequence[StepOption] | None = None,
) -> TransitionOutcome:
    """
    Decide o próximo passo da conversa.

    Args:
        current_step: Passo atual do estado persistido
        incoming: Entrada normalizada do cliente
        options: Opções do template do passo atual, do mesmo tipo da
            entrada (botões para BUTTON, linhas para LIST). None quando
            não há template para o passo.

    Returns:
        Advance com o próximo passo, ou Restart com o motivo
    """
    if is_completion_step(current_step):
        return Restart(RestartReason.CONVERSATION_COMPLETED, detail=current_step)

    if current_step == Step.CAMPAIGN_ENTRY:
        return _decide_campaign_entry(incoming, options)

    if current_step == Step.MAIN_MENU:
        return _decide_main_menu(incoming, options)

    if incoming.kind is InputKind.TEXT:
        successor = get_text_successor(current_step)
        if successor is None:
            return Restart(RestartReason.UNEXPECTED_TEXT, detail=current_step)
        return Advance(next_step=successor)

    return _decide_option(current_step, incoming, options)


def _decide_campaign_entry(
    incoming: TransitionInput,
    options: Sequence[StepOption] | None,
) -> TransitionOutcome:
    if is_website_request(incoming.content):
        return Advance(next_step=Step.WEBSITE_COMPLETE)

    if incoming.kind is InputKind.TEXT:
        return Restart(RestartReason.UNEXPECTED_TEXT, detail=Step.CAMPAIGN_ENTRY)

    language = (
        language_for_button(incoming.option_id)
        if incoming.kind is InputKind.BUTTON
        else None
    )
    if language is None:
        return Restart(
            RestartReason.INVALID_LANGUAGE_CHOICE,
            detail=incoming.option_id or "",
        )

    option = _find_option(options, incoming.option_id) or StepOption(
        id=incoming.option_id or "",
        title=incoming.content,
        next_step=Step.MAIN_MENU,
    )
    return Advance(next_step=Step.MAIN_MENU, language=language, option=option)


def _decide_main_menu(
    incoming: TransitionInput,
    options: Sequence[StepOption] | None,
) -> TransitionOutcome:
    if incoming.kind is InputKind.TEXT:
        return Restart(RestartReason.UNEXPECTED_TEXT, detail=Step.MAIN_MENU)

    if incoming.option_id != HELP_OPTION_ID:
        return Restart(_unknown_option_reason(incoming), detail=incoming.option_id or "")

    option = _find_option(options, HELP_OPTION_ID) or StepOption(
        id=HELP_OPTION_ID,
        title=incoming.content,
        next_step=Step.HELP_SUBMENU,
    )
    return Advance(next_step=Step.HELP_SUBMENU, option=option)


def _decide_option(
    current_step: str,
    incoming: TransitionInput,
    options: Sequence[StepOption] | None,
) -> TransitionOutcome:
    if options is None:
        return Restart(RestartReason.MISSING_TEMPLATE, detail=current_step)

    option = _find_option(options, incoming.option_id)
    if option is None:
        return Restart(_unknown_option_reason(incoming), detail=incoming.option_id or "")

    # Opção sem next_step mantém a conversa no mesmo passo
    return Advance(next_step=option.next_step or current_step, option=option)


def _find_option(
    options: Sequence[StepOption] | None,
    option_id: str | None,
) -> StepOption | None:
    if not options or not option_id:
        return None
    for option in options:
        if option.id == option_id:
            return option
    return None


def _unknown_option_reason(incoming: TransitionInput) -> RestartReason:
    if incoming.kind is InputKind.LIST:
        return RestartReason.UNKNOWN_LIST_ITEM
    return RestartReason.UNKNOWN_BUTTON
