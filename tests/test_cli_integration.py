"""Integration tests for CLI commands."""

from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from archlink.cli.main import build_search_engine, cli, main
from archlink.core.configuration import ArchlinkConfig
from archlink.core.exceptions import InstallError
from archlink.core.interfaces import PackageSource, RankedSuggestion, SearchResult
from archlink.fetcher import AURFetcher, OfficialRepositoryFetcher, PacmanSyncDatabaseFetcher


@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Create a configuration file for testing."""
    path = tmp_path / "config.yaml"
    path.write_text("max_results: 5\n")
    return str(path)


@pytest.fixture
def mock_engine():
    """Create a mock PackageSearchEngine."""
    with patch('archlink.cli.main.build_search_engine') as mock:
        yield mock.return_value


@pytest.fixture
def mock_installer():
    """Create a mock PackageInstaller."""
    with patch('archlink.cli.main.PackageInstaller') as mock:
        yield mock.return_value


@pytest.fixture
def sample_result():
    """Create a sample search result."""
    return SearchResult(
        query="pythn",
        suggestions=[
            RankedSuggestion(rank=1, name="python", description="The Python programming language",
                             source=PackageSource.OFFICIAL, version="3.12.7-1", score=0.25),
            RankedSuggestion(rank=2, name="python-foo", description="Foo bindings",
                             source=PackageSource.AUR, version="1.0-1", score=0.15),
        ],
        sources_searched=["official", "aur"],
    )


class TestSearchCommand:
    """Test the search command."""

    def test_search_lists_suggestions(self, runner, config_file, mock_engine, sample_result):
        mock_engine.search.return_value = sample_result

        result = runner.invoke(cli, ['--config', config_file, 'search', 'pythn', '--no-install'])

        assert result.exit_code == 0
        assert 'python' in result.output
        assert 'python-foo' in result.output
        mock_engine.search.assert_called_once_with('pythn', 5)
        mock_engine.close.assert_called_once()

    def test_limit_overrides_config(self, runner, config_file, mock_engine, sample_result):
        mock_engine.search.return_value = sample_result

        runner.invoke(cli, ['--config', config_file, 'search', 'pythn', '--limit', '2', '--no-install'])

        mock_engine.search.assert_called_once_with('pythn', 2)

    def test_invalid_limit_falls_back_to_default(self, runner, config_file, mock_engine, sample_result):
        mock_engine.search.return_value = sample_result

        runner.invoke(cli, ['--config', config_file, 'search', 'pythn', '--limit', '0', '--no-install'])

        mock_engine.search.assert_called_once_with('pythn', 10)

    def test_empty_query(self, runner, config_file, mock_engine):
        result = runner.invoke(cli, ['--config', config_file, 'search', '   '])

        assert result.exit_code == 1
        assert 'Query cannot be empty' in result.output
        mock_engine.search.assert_not_called()

    def test_no_results(self, runner, config_file, mock_engine):
        mock_engine.search.return_value = SearchResult(query="zzzz")

        result = runner.invoke(cli, ['--config', config_file, 'search', 'zzzz'])

        assert result.exit_code == 0
        assert "No packages found for 'zzzz'" in result.output

    def test_catalog_warning_shown(self, runner, config_file, mock_engine, sample_result):
        sample_result.errors = {"aur": "connection refused"}
        mock_engine.search.return_value = sample_result

        result = runner.invoke(cli, ['--config', config_file, 'search', 'pythn', '--no-install'])

        assert result.exit_code == 0
        assert 'aur search failed' in result.output

    def test_select_and_install(self, runner, config_file, mock_engine, mock_installer, sample_result):
        mock_engine.search.return_value = sample_result
        mock_installer.install.return_value = "pacman"

        result = runner.invoke(cli, ['--config', config_file, 'search', 'pythn'], input="1\ny\n")

        assert result.exit_code == 0
        mock_installer.install.assert_called_once_with("python", PackageSource.OFFICIAL)
        assert "Successfully installed 'python' with pacman" in result.output

    def test_decline_install(self, runner, config_file, mock_engine, mock_installer, sample_result):
        mock_engine.search.return_value = sample_result

        result = runner.invoke(cli, ['--config', config_file, 'search', 'pythn'], input="2\nn\n")

        assert result.exit_code == 0
        assert 'Installation cancelled' in result.output
        mock_installer.install.assert_not_called()

    def test_exit_without_selection(self, runner, config_file, mock_engine, mock_installer, sample_result):
        mock_engine.search.return_value = sample_result

        result = runner.invoke(cli, ['--config', config_file, 'search', 'pythn'], input="0\n")

        assert result.exit_code == 0
        mock_installer.install.assert_not_called()

    def test_out_of_range_selection(self, runner, config_file, mock_engine, mock_installer, sample_result):
        mock_engine.search.return_value = sample_result

        result = runner.invoke(cli, ['--config', config_file, 'search', 'pythn'], input="9\n")

        assert 'Invalid selection' in result.output
        mock_installer.install.assert_not_called()

    def test_missing_config_file(self, runner, tmp_path, mock_engine):
        result = runner.invoke(cli, ['--config', str(tmp_path / 'missing.yaml'), 'search', 'vim'])

        assert result.exit_code == 1
        assert 'Configuration file not found' in result.output


class TestInstallCommand:
    """Test the install command."""

    def test_install(self, runner, mock_installer):
        mock_installer.install.return_value = "yay"

        result = runner.invoke(cli, ['install', 'google-chrome'])

        assert result.exit_code == 0
        mock_installer.install.assert_called_once_with("google-chrome", None)

    def test_install_failure(self, runner, mock_installer):
        mock_installer.install.side_effect = InstallError("Failed to install 'nope'. Attempted: pacman.")

        result = runner.invoke(cli, ['install', 'nope'])

        assert result.exit_code == 1
        assert "Failed to install 'nope'" in result.output

    def test_install_empty_name(self, runner, mock_installer):
        result = runner.invoke(cli, ['install', ' '])

        assert result.exit_code == 1
        mock_installer.install.assert_not_called()


class TestConfigCommands:
    """Test the config command group."""

    def test_config_init(self, runner, tmp_path):
        path = tmp_path / "archlink" / "config.yaml"

        result = runner.invoke(cli, ['config', 'init', '--path', str(path)])

        assert result.exit_code == 0
        assert yaml.safe_load(path.read_text())["max_results"] == 10

    def test_config_init_existing(self, runner, config_file):
        result = runner.invoke(cli, ['config', 'init', '--path', config_file])

        assert result.exit_code == 1
        assert '--force' in result.output

    def test_config_show(self, runner, config_file):
        result = runner.invoke(cli, ['--config', config_file, 'config', 'show'])

        assert result.exit_code == 0
        assert 'max_results: 5' in result.output


class TestHelpers:
    """Test CLI helper functions."""

    def test_build_search_engine_web_backend(self):
        engine = build_search_engine(ArchlinkConfig(request_timeout=4))

        assert isinstance(engine.official_fetcher, OfficialRepositoryFetcher)
        assert isinstance(engine.aur_fetcher, AURFetcher)
        assert engine.aur_fetcher.config.request_timeout == 4

    def test_build_search_engine_local_backend(self, tmp_path):
        engine = build_search_engine(ArchlinkConfig(official_backend="local", sync_db_path=str(tmp_path)))

        assert isinstance(engine.official_fetcher, PacmanSyncDatabaseFetcher)
        assert engine.official_fetcher.sync_db_path == str(tmp_path)

    def test_main_version(self):
        with patch('sys.argv', ['archlink', '--version']):
            assert main() == 0
