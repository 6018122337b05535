"""
Unit tests for Settings
"""
from invoice_processor.core.config import DatabaseBackend, Settings


class TestSettings:

    def test_backend_is_parsed_into_the_enum(self):
        settings = Settings(_env_file=None, DATABASE_BACKEND="supabase")

        assert settings.DATABASE_BACKEND is DatabaseBackend.SUPABASE
        assert settings.DATABASE_BACKEND.value == "supabase"

    def test_allowed_origins_comma_separated(self):
        settings = Settings(_env_file=None, ALLOWED_ORIGINS="http://a.test, http://b.test")

        assert settings.get_allowed_origins() == ["http://a.test", "http://b.test"]

    def test_allowed_origins_json_array(self):
        settings = Settings(_env_file=None, ALLOWED_ORIGINS='["http://a.test"]')

        assert settings.get_allowed_origins() == ["http://a.test"]

    def test_allowed_origins_empty_falls_back_to_localhost(self):
        settings = Settings(_env_file=None, ALLOWED_ORIGINS="")

        assert settings.get_allowed_origins() == ["http://localhost:3000"]

    def test_numeric_values_are_coerced(self):
        settings = Settings(_env_file=None, DB_CONNECT_RETRIES="5", EXPORT_PAGE_SIZE="50")

        assert settings.DB_CONNECT_RETRIES == 5
        assert settings.EXPORT_PAGE_SIZE == 50
