"""Tests for the Translator host and create_translator()."""

import pytest

from inflector import (
    DuplicatedInflectionTokenError,
    InflectionOptions,
    InflectorError,
    InvalidOptionForKindError,
    Locale,
    MissingInterpolationArgumentError,
    PatternSyntaxError,
    TokenStatus,
    TranslationSnapshot,
    Translator,
    YAMLTranslationLoader,
    create_translator,
)
from tests.factories.inflector import make_inflection_config


@pytest.fixture
def en_translator(translator):
    """Translator holding English welcome messages and inflection data."""
    translator.store_translations(
        "en",
        {
            "welcome": {
                "formal": "Dear @{f:Madam|m:Sir|n:You|All}",
                "named": "Dear %{name}, @gender{f:Madam|m:Sir|All}",
                "complex": "Dear @gender+number{f+s:Lady|f+p:Ladies|m+s:Sir|m+p:Gentlemen|All}",
                "broken": "Dear @{f:Madam|m:Sir",
                "percent": "Use %%{name} literally",
            },
            "i18n": {"inflections": make_inflection_config()},
        },
    )
    return translator


class TestInflect:
    """Tests for Translator.inflect()."""

    @pytest.mark.parametrize(
        "options,expected",
        [
            ({"gender": "f"}, "Dear Madam"),
            ({"gender": "m"}, "Dear Sir"),
            ({"gender": "woman"}, "Dear Madam"),
            ({}, "Dear You"),
            ({"gender": "x"}, "Dear You"),
        ],
    )
    def test_formal(self, en_translator, options, expected):
        assert en_translator.inflect("en", "welcome.formal", options) == expected

    def test_variables_and_inflection_share_options(self, en_translator):
        result = en_translator.inflect(
            "en", "welcome.named", {"name": "Ann", "gender": "f"}
        )
        assert result == "Dear Ann, Madam"

    def test_complex(self, en_translator):
        options = {"gender": "m", "number": "p"}
        assert en_translator.inflect("en", "welcome.complex", options) == "Dear Gentlemen"

    def test_missing_variable(self, en_translator):
        with pytest.raises(MissingInterpolationArgumentError) as exc_info:
            en_translator.inflect("en", "welcome.named", {"gender": "f"})
        assert exc_info.value.variable == "name"

    def test_missing_variable_is_inflector_error(self, en_translator):
        with pytest.raises(InflectorError):
            en_translator.inflect("en", "welcome.named", {"gender": "f"})
        with pytest.raises(ValueError):
            en_translator.inflect("en", "welcome.named", {"gender": "f"})

    def test_escaped_variable(self, en_translator):
        assert en_translator.inflect("en", "welcome.percent") == "Use %{name} literally"

    def test_missing_key(self, en_translator):
        with pytest.raises(KeyError):
            en_translator.inflect("en", "welcome.missing")

    def test_missing_locale(self, en_translator):
        with pytest.raises(KeyError):
            en_translator.inflect("de", "welcome.formal")

    def test_malformed_pattern(self, en_translator):
        with pytest.raises(PatternSyntaxError):
            en_translator.inflect("en", "welcome.broken", {"gender": "f"})

    def test_locale_without_inflections(self, translator):
        """Patterns in locales without inflection data fall back to free text."""
        translator.store_translations("fr", {"welcome": {"formal": "@{f:Madame|Bonjour}"}})
        assert translator.inflect("fr", "welcome.formal", {"gender": "f"}) == "Bonjour"


class TestSwitches:
    """Tests for process-wide and per-call switches."""

    def test_per_call_switch(self, en_translator):
        with pytest.raises(InvalidOptionForKindError):
            en_translator.inflect(
                "en", "welcome.named", {"name": "Ann", "gender": "x"}, {"raises": True}
            )
        assert en_translator.options.raises is False

    def test_process_wide_switch(self, en_translator):
        en_translator.options.unknown_defaults = False
        assert en_translator.inflect("en", "welcome.formal", {"gender": "x"}) == "Dear All"

    def test_per_call_overrides_process_wide(self, en_translator):
        en_translator.options.unknown_defaults = False
        result = en_translator.inflect(
            "en", "welcome.formal", {"gender": "x"}, {"unknown_defaults": True}
        )
        assert result == "Dear You"

    def test_reset_options(self, en_translator):
        en_translator.options.raises = True
        en_translator.reset_options()
        assert en_translator.options == InflectionOptions()

    def test_reset_options_restores_configured_values(self):
        translator = Translator(options=InflectionOptions(aliased_patterns=True))
        translator.options.aliased_patterns = False
        translator.reset_options()
        assert translator.options.aliased_patterns is True

    def test_unknown_switch(self, en_translator):
        with pytest.raises(TypeError):
            en_translator.inflect("en", "welcome.formal", {}, {"rasies": True})


class TestStoreTranslations:
    """Tests for registry publication on store."""

    def test_store_merges(self, en_translator):
        en_translator.store_translations("en", {"welcome": {"plain": "Hi"}})

        assert en_translator.has_message("welcome.plain", "en")
        assert en_translator.has_message("welcome.formal", "en")

    def test_store_rebuilds_registry(self, en_translator):
        before = en_translator.registry("en")
        en_translator.store_translations(
            "en", {"i18n": {"inflections": {"gender": {"o": "other"}}}}
        )

        after = en_translator.registry("en")
        assert after is not before
        assert after.has_true_token("o", "gender")
        assert not before.has_true_token("o")

    def test_failed_build_keeps_previous_state(self, en_translator):
        before = en_translator.registry("en")

        with pytest.raises(DuplicatedInflectionTokenError):
            en_translator.store_translations(
                "en",
                {
                    "welcome": {"plain": "Hi"},
                    "i18n": {"inflections": {"number": {"f": "few"}}},
                },
            )

        assert en_translator.registry("en") is before
        assert not en_translator.has_message("welcome.plain", "en")
        assert en_translator.inflect("en", "welcome.formal", {"gender": "f"}) == "Dear Madam"

    def test_get_inflection_config(self, en_translator):
        assert set(en_translator.get_inflection_config("en")) == {"gender", "number"}
        assert en_translator.get_inflection_config("de") == {}


class TestSnapshots:
    """Tests for publishing catalogs and registries together."""

    def test_snapshot_pairs_catalogs_with_registries(self, en_translator):
        en_translator.store_translations("fr", {"welcome": {"plain": "Salut"}})
        snapshot = en_translator.snapshot

        assert set(snapshot.registries) == {Locale("en")}
        for locale, registry in snapshot.registries.items():
            assert set(registry.kinds) == set(snapshot.catalogs[locale].inflections)

    def test_store_publishes_new_snapshot(self, en_translator):
        before = en_translator.snapshot
        en_translator.store_translations(
            "en", {"i18n": {"inflections": {"gender": {"o": "other"}}}}
        )
        after = en_translator.snapshot

        assert after is not before
        assert "o" in after.catalogs[Locale("en")].inflections["gender"]
        assert after.registries[Locale("en")].has_true_token("o")
        assert "o" not in before.catalogs[Locale("en")].inflections["gender"]
        assert not before.registries[Locale("en")].has_true_token("o")

    def test_failed_build_keeps_snapshot(self, en_translator):
        before = en_translator.snapshot
        with pytest.raises(DuplicatedInflectionTokenError):
            en_translator.store_translations(
                "en", {"i18n": {"inflections": {"number": {"m": "many"}}}}
            )
        assert en_translator.snapshot is before

    def test_snapshot_is_read_only(self, en_translator):
        with pytest.raises(TypeError):
            en_translator.snapshot.registries[Locale("de")] = None
        with pytest.raises(TypeError):
            en_translator.catalogs[Locale("de")] = None

    def test_inflect_uses_one_snapshot(self, en_translator, monkeypatch):
        """A store landing after the template lookup does not change the registry used."""
        en_translator.store_translations(
            "en", {"welcome": {"other": "Dear @{o:Other|f:Madam|All}"}}
        )
        original_template = TranslationSnapshot.template

        def template_then_store(snapshot, locale, key):
            found = original_template(snapshot, locale, key)
            monkeypatch.setattr(TranslationSnapshot, "template", original_template)
            en_translator.store_translations(
                "en", {"i18n": {"inflections": {"gender": {"o": "other"}}}}
            )
            return found

        monkeypatch.setattr(TranslationSnapshot, "template", template_then_store)

        assert en_translator.inflect("en", "welcome.other", {"gender": "o"}) == "Dear All"
        assert en_translator.inflect("en", "welcome.other", {"gender": "o"}) == "Dear Other"

    def test_empty_translator(self, translator):
        assert translator.snapshot.catalogs == {}
        assert translator.interpolate("en", "@{f:Madam|Hello}", {"gender": "f"}) == "Hello"


class TestIntrospection:
    """Tests for inflection introspection."""

    def test_inflected_locales(self, en_translator):
        en_translator.store_translations("fr", {"welcome": {"plain": "Salut"}})
        en_translator.store_translations(
            "pl", {"i18n": {"inflections": {"case": {"nom": "nominative"}}}}
        )

        assert set(en_translator.inflected_locales()) == {Locale("en"), Locale("pl")}
        assert en_translator.inflected_locales("number") == [Locale("en")]

    def test_kinds(self, en_translator):
        en_translator.store_translations(
            "pl", {"i18n": {"inflections": {"case": {"nom": "nominative"}}}}
        )

        assert en_translator.kinds("en") == ["gender", "number"]
        assert set(en_translator.kinds()) == {"gender", "number", "case"}
        assert en_translator.kinds("de") == []

    def test_tokens(self, en_translator):
        assert en_translator.true_tokens("en", "number") == {
            "s": "singular",
            "p": "plural",
        }
        assert en_translator.aliases("en", "gender") == {
            "woman": "f",
            "man": "m",
            "lady": "f",
        }
        assert en_translator.tokens("en", "gender")["lady"] == "female"
        assert en_translator.tokens("de") == {}

    def test_token_status(self, en_translator):
        assert en_translator.token_status("f", "en") is TokenStatus.TRUE
        assert en_translator.token_status("man", "en", "gender") is TokenStatus.ALIAS
        assert en_translator.token_status("man", "en", "number") is TokenStatus.UNKNOWN
        assert en_translator.token_status("f", "de") is TokenStatus.UNKNOWN

    def test_default_token(self, en_translator):
        assert en_translator.default_token("en", "gender") == "n"
        assert en_translator.default_token("en", "case") is None
        assert en_translator.default_token("de", "gender") is None


class TestLoading:
    """Tests for loading translations through a loader."""

    def test_load_all(self, yaml_loader):
        translator = Translator(loader=yaml_loader, options=InflectionOptions())
        translator.load_all()

        assert set(translator.get_available_locales()) == {Locale("en"), Locale("pl")}
        assert translator.inflect("pl", "welcome.formal", {"gender": "female"}) == (
            "Szanowna Pani"
        )
        assert translator.inflect("pl", "welcome.formal") == "Szanowni Państwo"

    def test_load_locale(self, yaml_loader):
        translator = Translator(loader=yaml_loader, options=InflectionOptions())
        translator.load_locale("en")

        assert translator.get_available_locales() == [Locale("en")]
        assert translator.inflected_locales() == [Locale("en")]

    def test_reload(self, yaml_loader, temp_translations_dir):
        translator = Translator(loader=yaml_loader, options=InflectionOptions())
        translator.load_all()
        (temp_translations_dir / "extra.de.yml").write_text(
            "welcome:\n  plain: Hallo\n", encoding="utf-8"
        )

        translator.reload()
        assert translator.has_message("welcome.plain", "de")

    def test_without_loader(self, translator):
        with pytest.raises(RuntimeError):
            translator.load_all()


class TestCreateTranslator:
    """Tests for create_translator()."""

    def test_preload(self, temp_translations_dir):
        translator = create_translator(
            translations_dir=temp_translations_dir, options=InflectionOptions()
        )

        assert isinstance(translator.loader, YAMLTranslationLoader)
        assert translator.inflect(
            "en", "welcome.named", {"name": "Ann", "gender": "m"}
        ) == "Dear Ann, you are invited"

    def test_lazy(self, temp_translations_dir):
        translator = create_translator(
            translations_dir=temp_translations_dir, preload=False
        )
        assert translator.get_available_locales() == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ValueError):
            create_translator(translations_dir=tmp_path / "missing")
