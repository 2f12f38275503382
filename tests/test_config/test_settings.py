"""Testes das settings (base, conversa, WhatsApp)."""

from __future__ import annotations

import pytest

from config.settings import BaseSettings, ConversationSettings, WhatsAppSettings
from config.settings.base.conversation import _load_conversation_from_env
from config.settings.base.core import _load_base_from_env
from config.settings.whatsapp import _load_flow_ids, _load_from_env


class TestBaseSettings:
    def test_defaults_are_valid(self) -> None:
        settings = BaseSettings()

        assert settings.is_development is True
        assert settings.validate() == []

    def test_invalid_log_level(self) -> None:
        errors = BaseSettings(log_level="LOUD").validate()

        assert errors == ["LOG_LEVEL inválido: LOUD"]

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("prod", "production"), ("STAGE", "staging"), ("qa", "development")],
    )
    def test_environment_aliases(
        self,
        monkeypatch: pytest.MonkeyPatch,
        raw: str,
        expected: str,
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", raw)

        assert _load_base_from_env().environment == expected


class TestConversationSettings:
    def test_memory_backend_allowed_in_development(self) -> None:
        assert ConversationSettings().validate(BaseSettings()) == []

    def test_memory_backend_rejected_in_production(self) -> None:
        errors = ConversationSettings().validate(BaseSettings(environment="production"))

        assert "CONVERSATION_STORE_BACKEND=memory proibido em staging/production" in errors

    def test_redis_backend_requires_url(self) -> None:
        errors = ConversationSettings(store_backend="redis").validate(BaseSettings())

        assert errors == ["REDIS_URL obrigatório quando CONVERSATION_STORE_BACKEND=redis"]

    def test_missing_catalog(self) -> None:
        errors = ConversationSettings(template_catalog_path="/nope/campaign.yaml").validate(
            BaseSettings()
        )

        assert errors == ["TEMPLATE_CATALOG_PATH não encontrado: /nope/campaign.yaml"]

    def test_load_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONVERSATION_STORE_BACKEND", "REDIS")
        monkeypatch.setenv("CONVERSATION_LOG_MAX_ENTRIES", "20")

        settings = _load_conversation_from_env()

        assert settings.store_backend == "redis"
        assert settings.message_log_max_entries == 20


class TestWhatsAppSettings:
    def test_messages_endpoint(self) -> None:
        settings = WhatsAppSettings(phone_number_id="123", api_version="v21.0")

        assert settings.get_messages_endpoint() == "https://graph.facebook.com/v21.0/123/messages"
        assert settings.get_messages_endpoint("999").endswith("/999/messages")

    def test_messages_endpoint_requires_phone_number_id(self) -> None:
        with pytest.raises(ValueError):
            WhatsAppSettings().get_messages_endpoint()

    def test_flow_ids_from_environment(self) -> None:
        flow_ids = _load_flow_ids(
            {
                "WHATSAPP_FLOW_ID_SURVEY": "111",
                "WHATSAPP_FLOW_ID_SURVEY_HI": " 222 ",
                "WHATSAPP_FLOW_ID_PRICE": "  ",
                "OTHER": "x",
            }
        )

        assert flow_ids == {"survey": "111", "survey_hi": "222"}

    def test_get_flow_id_by_language(self) -> None:
        settings = WhatsAppSettings(flow_ids={"survey": "111", "survey_hi": "222", "price": "333"})

        assert settings.get_flow_id("survey", "en") == "111"
        assert settings.get_flow_id("survey", "hi") == "222"
        assert settings.get_flow_id("price", "hi") == "333"
        assert settings.get_flow_id("service", "en") is None

    def test_missing_flow_ids(self) -> None:
        settings = WhatsAppSettings(flow_ids={"survey": "1"})

        assert settings.missing_flow_ids(["survey", "price"]) == ["price"]

    def test_validate_lists_missing_credentials(self) -> None:
        errors = WhatsAppSettings().validate()

        assert "WHATSAPP_ACCESS_TOKEN não configurado" in errors
        assert "WHATSAPP_FLOW_PRIVATE_KEY não configurado" in errors

    def test_load_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WHATSAPP_ACCESS_TOKEN", "tok")
        monkeypatch.setenv("WHATSAPP_FLOW_ID_CALLBACK", "444")
        monkeypatch.setenv("WHATSAPP_MAX_RETRIES", "1")

        settings = _load_from_env()

        assert settings.access_token == "tok"
        assert settings.max_retries == 1
        assert settings.get_flow_id("callback") == "444"
