"""
Testes abrangentes para o módulo FSM.

- Testamos comportamento e contrato público
- Um teste cobre múltiplos componentes relacionados
- Foco em cenários válidos + inválidos + bordas
"""

import pytest

from fsm import (
    COMPLETION_STEPS,
    INITIAL_STEP,
    TEXT_CHAINS,
    TEXT_SUCCESSORS,
    Advance,
    InputKind,
    Language,
    Restart,
    RestartReason,
    Step,
    StepOption,
    TextChain,
    TransitionInput,
    chain_for_step,
    decide_transition,
    get_text_successor,
    is_completion_step,
    is_website_request,
    language_for_button,
    parse_language,
    validate_text_chains,
)


def _text(content: str) -> TransitionInput:
    return TransitionInput(kind=InputKind.TEXT, content=content)


def _button(option_id: str, title: str = "") -> TransitionInput:
    return TransitionInput(kind=InputKind.BUTTON, content=title, option_id=option_id)


def _list(option_id: str, title: str = "") -> TransitionInput:
    return TransitionInput(kind=InputKind.LIST, content=title, option_id=option_id)


# ══════════════════════════════════════════════════════════════
# Passos e idiomas
# ══════════════════════════════════════════════════════════════


class TestSteps:
    def test_initial_step_is_campaign_entry(self) -> None:
        assert INITIAL_STEP == "campaign_entry"

    def test_completion_steps(self) -> None:
        assert {str(step) for step in COMPLETION_STEPS} == {
            "survey_complete",
            "callback_complete",
            "service_complete",
            "issue_complete",
            "website_complete",
        }
        assert is_completion_step("survey_complete") is True
        assert is_completion_step("survey_time") is False
        assert is_completion_step("not_a_step") is False

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("en", Language.EN),
            ("HI", Language.HI),
            (" hi ", Language.HI),
            ("fr", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse_language(self, raw: str | None, expected: Language | None) -> None:
        assert parse_language(raw) == expected


class TestEntryRules:
    @pytest.mark.parametrize("content", ["w", "W", " website ", "WEBSITE", "वेबसाइट"])
    def test_website_keywords(self, content: str) -> None:
        assert is_website_request(content) is True

    @pytest.mark.parametrize("content", ["", None, "web", "hi", "www"])
    def test_non_website_text(self, content: str | None) -> None:
        assert is_website_request(content) is False

    def test_language_buttons(self) -> None:
        assert language_for_button("hindi") is Language.HI
        assert language_for_button("english") is Language.EN
        assert language_for_button("help") is None
        assert language_for_button(None) is None


# ══════════════════════════════════════════════════════════════
# Cadeias de texto
# ══════════════════════════════════════════════════════════════


class TestTextChains:
    def test_chains_are_valid(self) -> None:
        assert validate_text_chains() == []

    def test_every_chain_ends_in_completion(self) -> None:
        for chain in TextChain:
            assert TEXT_CHAINS[chain][-1] in COMPLETION_STEPS

    def test_survey_successors(self) -> None:
        assert get_text_successor("survey_name") == Step.SURVEY_MOBILE
        assert get_text_successor("survey_date") == Step.SURVEY_TIME
        assert get_text_successor("survey_time") == Step.SURVEY_COMPLETE

    def test_completion_and_menu_steps_have_no_successor(self) -> None:
        assert get_text_successor("survey_complete") is None
        assert get_text_successor("main_menu") is None
        assert get_text_successor("unknown") is None

    def test_successor_table_covers_all_non_terminal_chain_steps(self) -> None:
        expected = sum(len(steps) - 1 for steps in TEXT_CHAINS.values())
        assert len(TEXT_SUCCESSORS) == expected

    def test_chain_for_step(self) -> None:
        assert chain_for_step("callback_time") is TextChain.CALLBACK
        assert chain_for_step("issue_complete") is TextChain.ISSUE
        assert chain_for_step("main_menu") is None


# ══════════════════════════════════════════════════════════════
# decide_transition
# ══════════════════════════════════════════════════════════════


class TestCampaignEntry:
    def test_hindi_button_moves_to_main_menu_in_hindi(self) -> None:
        outcome = decide_transition("campaign_entry", _button("hindi", "हिंदी"))

        assert isinstance(outcome, Advance)
        assert outcome.next_step == Step.MAIN_MENU
        assert outcome.language is Language.HI
        assert outcome.option is not None
        assert outcome.option.id == "hindi"

    def test_english_button_uses_template_option(self) -> None:
        options = [StepOption("english", "English", "main_menu")]

        outcome = decide_transition("campaign_entry", _button("english"), options)

        assert isinstance(outcome, Advance)
        assert outcome.language is Language.EN
        assert outcome.option == options[0]

    def test_website_text_completes(self) -> None:
        outcome = decide_transition("campaign_entry", _text("Website"))

        assert isinstance(outcome, Advance)
        assert outcome.next_step == Step.WEBSITE_COMPLETE

    def test_other_text_restarts(self) -> None:
        outcome = decide_transition("campaign_entry", _text("hi"))

        assert outcome == Restart(RestartReason.UNEXPECTED_TEXT, detail="campaign_entry")

    def test_unknown_button_restarts_with_language_reason(self) -> None:
        outcome = decide_transition("campaign_entry", _button("spanish"))

        assert isinstance(outcome, Restart)
        assert outcome.reason is RestartReason.INVALID_LANGUAGE_CHOICE
        assert outcome.detail == "spanish"

    def test_list_reply_restarts(self) -> None:
        outcome = decide_transition("campaign_entry", _list("hindi"))

        assert isinstance(outcome, Restart)
        assert outcome.reason is RestartReason.INVALID_LANGUAGE_CHOICE


class TestMainMenu:
    def test_help_moves_to_help_submenu(self) -> None:
        outcome = decide_transition("main_menu", _button("help", "Help"))

        assert isinstance(outcome, Advance)
        assert outcome.next_step == Step.HELP_SUBMENU
        assert outcome.language is None

    def test_text_restarts(self) -> None:
        outcome = decide_transition("main_menu", _text("hello"))

        assert isinstance(outcome, Restart)
        assert outcome.reason is RestartReason.UNEXPECTED_TEXT

    def test_unknown_button_restarts(self) -> None:
        outcome = decide_transition("main_menu", _button("something"))

        assert outcome == Restart(RestartReason.UNKNOWN_BUTTON, detail="something")

    def test_unknown_list_item_restarts(self) -> None:
        outcome = decide_transition("main_menu", _list("row_9"))

        assert outcome == Restart(RestartReason.UNKNOWN_LIST_ITEM, detail="row_9")


class TestTemplateDrivenSteps:
    OPTIONS = [
        StepOption("callback", "Request callback", "callback_name"),
        StepOption("maintenance", "Maintenance", "service_name"),
        StepOption("stay", "Stay here", None),
    ]

    def test_option_follows_template_next_step(self) -> None:
        outcome = decide_transition("help_submenu", _list("maintenance"), self.OPTIONS)

        assert isinstance(outcome, Advance)
        assert outcome.next_step == "service_name"

    def test_option_without_next_step_stays(self) -> None:
        outcome = decide_transition("help_submenu", _button("stay"), self.OPTIONS)

        assert isinstance(outcome, Advance)
        assert outcome.next_step == "help_submenu"

    def test_unknown_option_restarts(self) -> None:
        outcome = decide_transition("help_submenu", _button("nope"), self.OPTIONS)

        assert isinstance(outcome, Restart)
        assert outcome.reason is RestartReason.UNKNOWN_BUTTON

    def test_missing_template_restarts(self) -> None:
        outcome = decide_transition("help_submenu", _button("callback"), None)

        assert outcome == Restart(RestartReason.MISSING_TEMPLATE, detail="help_submenu")

    def test_text_in_chain_advances(self) -> None:
        outcome = decide_transition("survey_time", _text("10 AM"))

        assert outcome == Advance(next_step=Step.SURVEY_COMPLETE)

    def test_text_on_option_step_restarts(self) -> None:
        outcome = decide_transition("help_submenu", _text("please call"), self.OPTIONS)

        assert outcome == Restart(RestartReason.UNEXPECTED_TEXT, detail="help_submenu")


class TestRestartClosure:
    @pytest.mark.parametrize("step", sorted(str(step) for step in COMPLETION_STEPS))
    @pytest.mark.parametrize(
        "incoming",
        [_text("anything"), _button("hindi"), _list("row")],
    )
    def test_any_input_on_completion_step_restarts(
        self,
        step: str,
        incoming: TransitionInput,
    ) -> None:
        outcome = decide_transition(step, incoming)

        assert isinstance(outcome, Restart)
        assert outcome.reason is RestartReason.CONVERSATION_COMPLETED

    def test_log_dicts(self) -> None:
        advance = Advance(next_step="main_menu", language=Language.HI)
        restart = Restart(RestartReason.UNKNOWN_BUTTON, detail="x")

        assert advance.to_log_dict() == {
            "outcome": "advance",
            "next_step": "main_menu",
            "language": "hi",
        }
        assert restart.to_log_dict() == {
            "outcome": "restart",
            "reason": "unknown_button",
            "detail": "x",
        }
