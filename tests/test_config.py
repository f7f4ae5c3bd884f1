"""Tests for configuration loading, thresholds and gate policy."""

import pytest

from qualigate.config import (
    DEFAULT_CATEGORY_THRESHOLDS,
    GatesConfig,
    GateThreshold,
    ScoringConfig,
    load_config,
    parse_categories,
    parse_threshold,
    parse_thresholds,
)
from qualigate.exceptions import (
    ConfigurationError,
    InvalidConfigError,
    InvalidThresholdError,
    UnknownCategoryError,
)
from qualigate.models import Category, ProjectType


class TestGateThreshold:
    def test_valid(self):
        t = GateThreshold(minimum=15, warning=18)
        assert t.block_on_failure is True

    def test_negative_minimum(self):
        with pytest.raises(InvalidThresholdError):
            GateThreshold(minimum=-1, warning=5)

    def test_warning_below_minimum(self):
        with pytest.raises(InvalidThresholdError):
            GateThreshold(minimum=20, warning=10)

    def test_scaled(self):
        t = GateThreshold(minimum=70, warning=80, block_on_failure=False).scaled(0.35)
        assert t.minimum == 24.5
        assert t.warning == 28
        assert t.block_on_failure is False

    def test_to_dict(self):
        assert GateThreshold(7, 9).to_dict() == {"min": 7, "warning": 9, "block_on_failure": True}


class TestParseCategories:
    def test_none_and_all(self):
        assert parse_categories(None) == tuple(Category)
        assert parse_categories("all") == tuple(Category)
        assert parse_categories("") == tuple(Category)

    def test_comma_separated_keeps_order(self):
        assert parse_categories("testing, quality") == (Category.TESTING, Category.QUALITY)

    def test_duplicates_dropped(self):
        assert parse_categories(["quality", "QUALITY", Category.QUALITY]) == (Category.QUALITY,)

    def test_unknown(self):
        with pytest.raises(UnknownCategoryError):
            parse_categories("quality,bogus")


class TestParseThreshold:
    def test_warning_defaults_to_minimum(self):
        t = parse_threshold("quality", {"min": 12})
        assert t.minimum == 12 and t.warning == 12

    def test_camel_case_blocking_key(self):
        t = parse_threshold("quality", {"min": 12, "warning": 14, "blockOnFailure": False})
        assert t.block_on_failure is False

    def test_missing_min(self):
        with pytest.raises(InvalidThresholdError, match="quality"):
            parse_threshold("quality", {"warning": 12})

    def test_unknown_key(self):
        with pytest.raises(InvalidThresholdError):
            parse_threshold("quality", {"min": 1, "max": 2})

    def test_not_a_mapping(self):
        with pytest.raises(InvalidThresholdError):
            parse_threshold("quality", 12)

    def test_non_numeric(self):
        with pytest.raises(InvalidThresholdError):
            parse_threshold("quality", {"min": "high"})

    def test_reports_scope_on_ordering_error(self):
        with pytest.raises(InvalidThresholdError) as exc:
            parse_threshold("security", {"min": 12, "warning": 10})
        assert exc.value.scope == "security"


class TestParseThresholds:
    def test_json_overrides_overall(self):
        gates = parse_thresholds('{"overall": {"min": 75, "warning": 85}}')
        assert gates.overall == GateThreshold(75, 85)
        assert gates.categories == DEFAULT_CATEGORY_THRESHOLDS

    def test_category_merged_over_base(self):
        gates = parse_thresholds({"categories": {"quality": {"min": 10, "warning": 12}}})
        assert gates.categories[Category.QUALITY] == GateThreshold(10, 12)
        assert gates.categories[Category.TESTING] == DEFAULT_CATEGORY_THRESHOLDS[Category.TESTING]

    def test_keeps_base_settings(self):
        base = GatesConfig(ci_format="jenkins", blocking=False)
        gates = parse_thresholds({"overall": {"min": 50}}, base)
        assert gates.ci_format == "jenkins"
        assert gates.blocking is False

    def test_malformed_json(self):
        with pytest.raises(ConfigurationError, match="Malformed thresholds JSON"):
            parse_thresholds("{overall: 70")

    def test_not_an_object(self):
        with pytest.raises(ConfigurationError):
            parse_thresholds("[1, 2]")

    def test_unknown_section(self):
        with pytest.raises(ConfigurationError, match="Unknown threshold sections"):
            parse_thresholds({"everything": {}})

    def test_unknown_category(self):
        with pytest.raises(UnknownCategoryError):
            parse_thresholds({"categories": {"speed": {"min": 1}}})


class TestGatesConfig:
    def test_defaults(self):
        gates = GatesConfig()
        assert gates.enabled
        assert gates.blocking
        assert gates.ci_format == "auto"
        assert gates.overall == GateThreshold(70, 80)
        assert set(gates.categories) == set(Category)

    def test_string_keys_parsed(self):
        gates = GatesConfig(categories={"quality": {"min": 5, "warning": 6}})
        assert gates.categories == {Category.QUALITY: GateThreshold(5, 6)}

    def test_unknown_ci_format(self):
        with pytest.raises(InvalidConfigError):
            GatesConfig(ci_format="travis")

    def test_empty_prefix(self):
        with pytest.raises(InvalidConfigError):
            GatesConfig(environment_prefix="")


class TestScoringConfig:
    def test_defaults(self):
        config = ScoringConfig()
        assert config.categories == tuple(Category)
        assert config.verbosity == "normal"
        assert config.include_recommendations
        assert config.max_file_size_bytes == 2 * 1024 * 1024

    def test_categories_from_string(self):
        assert ScoringConfig(categories="quality,testing").categories == (
            Category.QUALITY,
            Category.TESTING,
        )

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"categories": ()},
            {"max_concurrency": 0},
            {"timeout_seconds": 0},
            {"verbosity": "loud"},
            {"max_recommendations": -1},
            {"max_file_size_mb": 0},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigError):
            ScoringConfig(**kwargs)


class TestLoadConfig:
    def test_defaults(self, isolated_home, tmp_path):
        config = load_config(project_root=tmp_path)
        assert config == ScoringConfig()

    def test_project_file(self, isolated_home, tmp_path):
        (tmp_path / "qualigate.toml").write_text(
            'categories = ["quality", "testing"]\n'
            "max_recommendations = 5\n"
            "\n"
            "[gates]\n"
            'ci_format = "jenkins"\n'
            "blocking = false\n"
            "\n"
            "[gates.overall]\n"
            "min = 60\n"
            "warning = 75\n"
            "\n"
            "[gates.categories.quality]\n"
            "min = 10\n"
            "warning = 12\n"
        )
        config = load_config(project_root=tmp_path)
        assert config.categories == (Category.QUALITY, Category.TESTING)
        assert config.max_recommendations == 5
        assert config.gates.ci_format == "jenkins"
        assert config.gates.blocking is False
        assert config.gates.overall == GateThreshold(60, 75)
        assert config.gates.categories[Category.QUALITY] == GateThreshold(10, 12)
        assert config.gates.categories[Category.SECURITY] == GateThreshold(12, 14)

    def test_global_file_is_overridden_by_project(self, isolated_home, tmp_path):
        (isolated_home / ".qualigate.toml").write_text("max_concurrency = 2\ntimeout_seconds = 10\n")
        (tmp_path / "qualigate.toml").write_text("max_concurrency = 8\n")
        config = load_config(project_root=tmp_path)
        assert config.max_concurrency == 8
        assert config.timeout_seconds == 10

    def test_explicit_file(self, isolated_home, tmp_path):
        explicit = tmp_path / "custom.toml"
        explicit.write_text('project_type = "node-api"\n')
        config = load_config(config_file=explicit, project_root=tmp_path)
        assert config.project_type is ProjectType.NODE_API

    def test_explicit_file_missing(self, isolated_home, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=tmp_path / "nope.toml", project_root=tmp_path)

    def test_malformed_toml(self, isolated_home, tmp_path):
        (tmp_path / "qualigate.toml").write_text("categories = [\n")
        with pytest.raises(ConfigurationError, match="Invalid project config"):
            load_config(project_root=tmp_path)

    def test_unknown_key(self, isolated_home, tmp_path):
        (tmp_path / "qualigate.toml").write_text("colour = true\n")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(project_root=tmp_path)

    def test_unknown_gates_key(self, isolated_home, tmp_path):
        (tmp_path / "qualigate.toml").write_text("[gates]\nstrict = true\n")
        with pytest.raises(ConfigurationError, match=r"Invalid \[gates\] config"):
            load_config(project_root=tmp_path)

    def test_invalid_project_type(self, isolated_home, tmp_path):
        with pytest.raises(InvalidConfigError):
            load_config(project_root=tmp_path, project_type="mainframe")

    def test_env_vars(self, isolated_home, tmp_path, monkeypatch):
        monkeypatch.setenv("QUALIGATE_CATEGORIES", "security")
        monkeypatch.setenv("QUALIGATE_MAX_CONCURRENCY", "2")
        monkeypatch.setenv("QUALIGATE_INCLUDE_RECOMMENDATIONS", "false")
        monkeypatch.setenv("QUALIGATE_TIMEOUT_SECONDS", "12.5")
        config = load_config(project_root=tmp_path)
        assert config.categories == (Category.SECURITY,)
        assert config.max_concurrency == 2
        assert config.include_recommendations is False
        assert config.timeout_seconds == 12.5

    def test_env_var_bad_bool(self, isolated_home, tmp_path, monkeypatch):
        monkeypatch.setenv("QUALIGATE_INCLUDE_RECOMMENDATIONS", "maybe")
        with pytest.raises(InvalidConfigError) as exc:
            load_config(project_root=tmp_path)
        assert exc.value.key == "QUALIGATE_INCLUDE_RECOMMENDATIONS"

    def test_env_var_bad_int(self, isolated_home, tmp_path, monkeypatch):
        monkeypatch.setenv("QUALIGATE_MAX_CONCURRENCY", "many")
        with pytest.raises(InvalidConfigError):
            load_config(project_root=tmp_path)

    def test_overrides_beat_env(self, isolated_home, tmp_path, monkeypatch):
        monkeypatch.setenv("QUALIGATE_CATEGORIES", "security")
        config = load_config(project_root=tmp_path, categories="quality")
        assert config.categories == (Category.QUALITY,)

    def test_none_overrides_ignored(self, isolated_home, tmp_path):
        (tmp_path / "qualigate.toml").write_text("include_recommendations = false\n")
        config = load_config(project_root=tmp_path, include_recommendations=None, categories=None)
        assert config.include_recommendations is False
        assert config.categories == tuple(Category)

    def test_verbose_and_quiet_flags(self, isolated_home, tmp_path):
        assert load_config(project_root=tmp_path, verbose=True).verbosity == "verbose"
        assert load_config(project_root=tmp_path, quiet=True).verbosity == "quiet"
        assert load_config(project_root=tmp_path, verbose=False).verbosity == "normal"

    def test_unknown_category_override(self, isolated_home, tmp_path):
        with pytest.raises(UnknownCategoryError):
            load_config(project_root=tmp_path, categories="quality,speed")
