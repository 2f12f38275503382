"""
Tabela fixa de sucessores para os passos de texto livre.

Passos de botão/lista seguem o `next_step` declarado no template; apenas
as cadeias de texto têm sucessor fixo, definido aqui.
"""

from enum import StrEnum

from fsm.states.steps import COMPLETION_STEPS, Step


class TextChain(StrEnum):
    """Cadeias de coleta por texto livre."""

    SURVEY = "survey"
    CALLBACK = "callback"
    SERVICE = "service"
    ISSUE = "issue"


# Ordem das perguntas de cada cadeia; o último item é o passo de conclusão
TEXT_CHAINS: dict[TextChain, tuple[Step, ...]] = {
    TextChain.SURVEY: (
        Step.SURVEY_NAME,
        Step.SURVEY_MOBILE,
        Step.SURVEY_ADDRESS,
        Step.SURVEY_VILLAGE,
        Step.SURVEY_DATE,
        Step.SURVEY_TIME,
        Step.SURVEY_COMPLETE,
    ),
    TextChain.CALLBACK: (
        Step.CALLBACK_NAME,
        Step.CALLBACK_MOBILE,
        Step.CALLBACK_TIME,
        Step.CALLBACK_COMPLETE,
    ),
    TextChain.SERVICE: (
        Step.SERVICE_NAME,
        Step.SERVICE_MOBILE,
        Step.SERVICE_ADDRESS,
        Step.SERVICE_DESCRIPTION,
        Step.SERVICE_COMPLETE,
    ),
    TextChain.ISSUE: (
        Step.ISSUE_NAME,
        Step.ISSUE_MOBILE,
        Step.ISSUE_DESCRIPTION,
        Step.ISSUE_COMPLETE,
    ),
}


def _build_successors() -> dict[Step, Step]:
    successors: dict[Step, Step] = {}
    for steps in TEXT_CHAINS.values():
        for current, following in zip(steps, steps[1:], strict=False):
            successors[current] = following
    return successors


# Mapa plano passo -> próximo passo (derivado de TEXT_CHAINS)
TEXT_SUCCESSORS: dict[Step, Step] = _build_successors()


def get_text_successor(step: str) -> Step | None:
    """
    Retorna o próximo passo para uma resposta de texto.

    Args:
        step: Passo atual

    Returns:
        Próximo passo, ou None se o passo não aceita texto livre
    """
    return TEXT_SUCCESSORS.get(step)  # type: ignore[call-overload]


def chain_for_step(step: str) -> TextChain | None:
    """Retorna a cadeia a que o passo pertence (None se não pertence)."""
    for chain, steps in TEXT_CHAINS.items():
        if step in steps:
            return chain
    return None


def validate_text_chains() -> list[str]:
    """
    Valida a integridade das cadeias de texto.

    Verifica:
    - Toda cadeia declarada no enum tem entrada
    - Toda cadeia termina em passo de conclusão
    - Nenhum passo aparece em duas cadeias

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []
    seen: set[Step] = set()

    for chain in TextChain:
        steps = TEXT_CHAINS.get(chain)
        if not steps:
            errors.append(f"Cadeia {chain.name} ausente em TEXT_CHAINS")
            continue
        if steps[-1] not in COMPLETION_STEPS:
            errors.append(f"Cadeia {chain.name} não termina em passo de conclusão")
        for step in steps:
            if step in seen:
                errors.append(f"Passo {step.name} repetido entre cadeias")
            seen.add(step)

    return errors
