"""
配置测试
"""
import pytest

from config.settings import Settings


@pytest.mark.unit
class TestSettings:
    def test_provider_info_configured(self):
        settings = Settings(KIMI_API_KEY="sk-abc", KIMI_MODEL="moonshot-v1-32k")

        assert settings.get_current_provider_info() == {
            "provider": "kimi",
            "model": "moonshot-v1-32k",
            "status": "configured",
        }

    def test_provider_info_missing_key(self):
        info = Settings(KIMI_API_KEY="").get_current_provider_info()
        assert info["status"] == "missing_key"

    def test_local_cors_origins(self):
        settings = Settings(VERCEL=False, CORS_ORIGINS="http://a.test, http://b.test,")
        assert settings.get_cors_origins() == ["http://a.test", "http://b.test"]

    def test_hosted_cors_is_open(self):
        assert Settings(VERCEL=True).get_cors_origins() == ["*"]

    def test_validate_settings_warns_on_missing_key(self):
        warnings = Settings(KIMI_API_KEY="", VERCEL=False).validate_settings()
        assert any("KIMI_API_KEY" in w for w in warnings)
