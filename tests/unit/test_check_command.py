"""
Unit tests for the check command
"""

from styled_sort.commands.check import CheckCommand
from styled_sort.core.backup_manager import BackupManager
from styled_sort.core.config import Config
from styled_sort.core.results import ProcessingStatus


def make_config(tmp_path, **backup):
    config = Config()
    config.backup.directory = str(tmp_path / ".backups")
    for key, value in backup.items():
        setattr(config.backup, key, value)
    return config


class TestCheckCommand:
    """Test CheckCommand"""

    def test_reports_problems(self, tmp_path, dependent_pair, capsys):
        path = dependent_pair.write(tmp_path / "App.jsx")

        result = CheckCommand(make_config(tmp_path)).execute(tmp_path)

        out = capsys.readouterr().out
        assert result.status == ProcessingStatus.PROBLEMS
        assert not result.is_clean
        assert f"{path}:1:7: Declaration of B should be after A" in out
        assert "1 files checked, 1 problems, 0 fixes applied, 0 errors" in out

    def test_clean_directory(self, tmp_path, builder):
        builder().styled("A").styled("B").usage("A", "B").write(tmp_path / "App.jsx")

        result = CheckCommand(make_config(tmp_path)).execute(tmp_path)

        assert result.status == ProcessingStatus.CLEAN
        assert result.is_clean

    def test_no_files(self, tmp_path):
        result = CheckCommand(make_config(tmp_path)).execute(tmp_path)

        assert result.status == ProcessingStatus.SKIPPED

    def test_ast_requires_single_file(self, tmp_path):
        result = CheckCommand(make_config(tmp_path)).execute(
            tmp_path, ast_path=tmp_path / "dump.json"
        )

        assert result.status == ProcessingStatus.ERROR

    def test_error_file(self, tmp_path, capsys):
        (tmp_path / "App.jsx").write_text("const A = 1;")

        result = CheckCommand(make_config(tmp_path)).execute(tmp_path)

        assert result.status == ProcessingStatus.ERROR
        assert "1 errors" in capsys.readouterr().out

    def test_fix_with_backup(self, tmp_path, dependent_pair):
        """Test fixing writes the file and records a backup session"""
        path = dependent_pair.write(tmp_path / "App.jsx")
        config = make_config(tmp_path, compression=False)

        result = CheckCommand(config).execute(path, fix=True)

        assert result.status == ProcessingStatus.FIXED
        assert result.changes_applied == 1
        assert result.is_clean
        assert path.read_text() != dependent_pair.text
        sessions = BackupManager(config.backup.directory).list_sessions()
        assert len(sessions) == 1
        assert sessions[0]["files"] == [str(path.resolve())]

    def test_fix_without_backup(self, tmp_path, dependent_pair):
        path = dependent_pair.write(tmp_path / "App.jsx")
        config = make_config(tmp_path, enabled=False)

        CheckCommand(config).execute(path, fix=True)

        assert not (tmp_path / ".backups").exists()

    def test_unresolvable_reported_without_fix(self, tmp_path, builder, capsys):
        source = builder().styled("A", refs=("B",)).styled("B", refs=("A",))
        source.write(tmp_path / "App.jsx")

        result = CheckCommand(make_config(tmp_path)).execute(tmp_path, fix=True)

        out = capsys.readouterr().out
        assert not result.is_clean
        assert "A -> B -> A (no automatic fix)" in out
