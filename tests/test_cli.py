"""
Tests for the command shell: line parsing, prompts, commands and sessions.
"""

import pytest
from photocatalog import __version__
from photocatalog.catalog import Catalog, CatalogStore
from photocatalog.cli import (
    CLIOrchestrator,
    Command,
    CommandInterpreter,
    ShellSettings,
    ask_yes_no,
    parse_arguments,
    parse_command_line,
    split_arguments,
)
from photocatalog.cli.reporting import STATUS_MESSAGES
from photocatalog.config import KEYWORD_DELETED, KEYWORD_DUPLICATE


def scripted_input(*answers):
    """Input function returning the given answers, then raising EOFError."""
    remaining = list(answers)

    def _input(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)
    return _input


class TestSplitArguments:
    """Test command line splitting."""

    def test_whitespace(self):
        assert split_arguments("ADD  /photos   -r") == ["ADD", "/photos", "-r"]

    def test_quoted_word(self):
        assert split_arguments('AK holiday "/photos/summer 2023"') == ["AK", "holiday", "/photos/summer 2023"]

    def test_empty_quoted_word(self):
        assert split_arguments('AK "" /photos') == ["AK", "", "/photos"]

    def test_unterminated_quote(self):
        assert split_arguments('ADD "/photos/new folder') == ["ADD", "/photos/new folder"]

    def test_blank(self):
        assert split_arguments("   ") == []


class TestParseCommandLine:
    """Test parse_command_line function."""

    def test_name_upper_cased(self):
        assert parse_command_line('list d "/photos/2023"') == Command("LIST", ("d", "/photos/2023"))

    def test_no_arguments(self):
        assert parse_command_line("stats") == Command("STATS", ())

    def test_blank_line(self):
        assert parse_command_line("") == Command("")


class TestAskYesNo:
    """Test ask_yes_no prompt."""

    @pytest.mark.parametrize("answer, expected", [
        ("y", "Y"), ("YES", "Y"), ("n", "N"), (" No ", "N"),
    ])
    def test_answers(self, answer, expected):
        assert ask_yes_no("Save?", input_func=scripted_input(answer)) == expected

    def test_cancel(self):
        assert ask_yes_no("Save?", cancel=True, input_func=scripted_input("c")) == "C"

    def test_cancel_not_offered(self, capsys):
        answer = ask_yes_no("Save?", input_func=scripted_input("cancel", "n"))
        assert answer == "N"
        assert "Invalid response" in capsys.readouterr().out

    def test_repeats_until_valid(self, capsys):
        answer = ask_yes_no("Save?", cancel=True, input_func=scripted_input("maybe", "", "yes"))
        assert answer == "Y"
        assert capsys.readouterr().out.count("Invalid response") == 2

    def test_end_of_input(self):
        assert ask_yes_no("Save?", cancel=True, input_func=scripted_input()) == "C"
        assert ask_yes_no("Save?", input_func=scripted_input()) == "N"


class TestArgumentParser:
    """Test command-line argument parsing."""

    def test_defaults(self):
        args = parse_arguments([])
        assert args.db_file is None
        assert args.commands is None
        assert not args.verbose

    def test_commands_in_order(self):
        args = parse_arguments(["photos", "-c", "ADD /p", "--command", "SAVE", "--no-progress"])
        assert str(args.db_file) == "photos"
        assert args.commands == ["ADD /p", "SAVE"]
        assert args.no_progress


@pytest.fixture
def make_shell(temp_dir):
    """
    Factory for an interpreter on an empty catalog.

    Example:
        shell = make_shell('y')   # answers 'y' to the first question
    """
    def _make(*answers, store_path=None):
        catalog = Catalog()
        store = CatalogStore(store_path or temp_dir / "db" / "catalog.json")
        return CommandInterpreter(
            catalog, store, ShellSettings(show_progress=False), input_func=scripted_input(*answers)
        )
    return _make


def run(shell, line):
    return shell.execute(parse_command_line(line))


class TestCommandInterpreter:
    """Test shell commands."""

    def test_add_directory(self, make_shell, sample_images, temp_dir, capsys):
        shell = make_shell()
        assert run(shell, f'ADD "{temp_dir}"') is False
        assert len(shell.catalog) == 4
        assert "Add: 4 added" in capsys.readouterr().out

    def test_add_lower_case_alias(self, make_shell, sample_images):
        shell = make_shell()
        run(shell, f'a "{sample_images["exif"]}"')
        assert len(shell.catalog) == 1

    def test_add_missing_path(self, make_shell, temp_dir, capsys):
        shell = make_shell()
        run(shell, f'ADD "{temp_dir / "missing"}"')
        assert STATUS_MESSAGES['path_not_found'] in capsys.readouterr().out

    def test_add_wrong_arguments(self, make_shell, capsys):
        shell = make_shell()
        run(shell, "ADD")
        assert STATUS_MESSAGES['invalid_arguments'] in capsys.readouterr().out

    def test_add_keyword_to_directory(self, make_shell, sample_images, temp_dir, capsys):
        shell = make_shell()
        run(shell, f'ADD "{temp_dir}"')
        run(shell, f'AK holiday "{temp_dir}"')
        assert "Keyword HOLIDAY added to 4 files." in capsys.readouterr().out
        assert len(shell.catalog.find_with_keyword("holiday")) == 4

    def test_remove_keyword_from_file(self, make_shell, sample_images, temp_dir):
        shell = make_shell()
        run(shell, f'ADD "{temp_dir}"')
        run(shell, f'AK holiday "{temp_dir}"')
        run(shell, f'RK HOLIDAY "{sample_images["unique"]}"')
        assert len(shell.catalog.find_with_keyword("holiday")) == 3

    def test_reserved_keyword_refused(self, make_shell, sample_images, capsys):
        shell = make_shell()
        run(shell, f'ADD "{sample_images["unique"]}"')
        run(shell, f'AK dup "{sample_images["unique"]}"')
        assert STATUS_MESSAGES['reserved_keyword'] in capsys.readouterr().out
        assert shell.catalog.find_with_keyword(KEYWORD_DUPLICATE) is None

    def test_keyword_on_uncataloged_path(self, make_shell, sample_images, capsys):
        shell = make_shell()
        run(shell, f'AK holiday "{sample_images["unique"]}"')
        assert STATUS_MESSAGES['not_cataloged'] in capsys.readouterr().out

    def test_empty_keyword_reported(self, make_shell, sample_images, capsys):
        shell = make_shell()
        run(shell, f'ADD "{sample_images["unique"]}"')
        assert run(shell, f'AK "" "{sample_images["unique"]}"') is False
        assert "ERROR: Keyword must be a non-empty string" in capsys.readouterr().out

    def test_remove(self, make_shell, sample_images, temp_dir, capsys):
        shell = make_shell()
        run(shell, f'ADD "{temp_dir}"')
        run(shell, f'REMOVE "{sample_images["unique"]}"')
        assert "Removed 1 files from the catalog." in capsys.readouterr().out
        assert shell.catalog.get_file_id(sample_images['unique']) is None
        assert len(shell.catalog) == 3

    def test_list_overview(self, make_shell, sample_images, temp_dir, capsys):
        shell = make_shell()
        run(shell, f'ADD "{temp_dir}"')
        run(shell, f'AK trip "{temp_dir}"')
        capsys.readouterr()

        run(shell, "LIST")

        out = capsys.readouterr().out
        assert "Directories (1):" in out
        assert str(temp_dir) in out
        assert "TRIP" in out

    def test_list_by_keyword(self, make_shell, sample_images, capsys):
        shell = make_shell()
        run(shell, f'ADD "{sample_images["unique"]}"')
        run(shell, f'ADD "{sample_images["exif"]}"')
        run(shell, f'AK trip "{sample_images["exif"]}"')
        capsys.readouterr()

        run(shell, "L k TRIP")

        out = capsys.readouterr().out
        assert "(1 files)" in out
        assert sample_images['exif'] in out
        assert sample_images['unique'] not in out

    def test_list_by_directory(self, make_shell, sample_images, temp_dir, capsys):
        shell = make_shell()
        run(shell, f'ADD "{temp_dir}"')
        capsys.readouterr()
        run(shell, f'LIST D "{temp_dir}"')
        assert "(4 files)" in capsys.readouterr().out

    def test_list_bad_kind(self, make_shell, capsys):
        shell = make_shell()
        run(shell, "LIST X something")
        assert STATUS_MESSAGES['invalid_arguments'] in capsys.readouterr().out

    def test_details(self, make_shell, sample_images, capsys):
        shell = make_shell()
        run(shell, f'ADD "{sample_images["exif"]}"')
        capsys.readouterr()

        run(shell, f'DETAILS "{sample_images["exif"]}"')

        out = capsys.readouterr().out
        assert "Timestamp:  20200102 030405" in out
        assert "Make: TestMake" in out
        assert "[IFD0]" in out

    def test_details_uncataloged(self, make_shell, sample_images, capsys):
        shell = make_shell()
        run(shell, f'D "{sample_images["exif"]}"')
        assert STATUS_MESSAGES['not_cataloged'] in capsys.readouterr().out

    def test_duplicates(self, make_shell, sample_images, temp_dir, capsys):
        shell = make_shell()
        run(shell, f'ADD "{temp_dir}"')
        capsys.readouterr()

        run(shell, "DUPLICATES")

        out = capsys.readouterr().out
        assert "Group 1 (2 files" in out
        assert sample_images['identical1'] in out
        assert "Duplicate files: 2 in 1 groups" in out
        assert shell.catalog.find_with_keyword(KEYWORD_DUPLICATE) is not None

    def test_no_duplicates(self, make_shell, sample_images, capsys):
        shell = make_shell()
        run(shell, f'ADD "{sample_images["unique"]}"')
        run(shell, "DD")
        assert "No duplicates found." in capsys.readouterr().out

    def test_scan(self, make_shell, sample_images, temp_dir, capsys):
        shell = make_shell()
        run(shell, f'ADD "{temp_dir}"')
        temp_dir.joinpath("unique.png").unlink()
        capsys.readouterr()

        run(shell, "SCAN")

        assert "Scan: 3 unchanged, 1 deleted" in capsys.readouterr().out
        assert shell.catalog.find_with_keyword(KEYWORD_DELETED) is not None

    def test_stats(self, make_shell, sample_images, temp_dir, capsys):
        shell = make_shell()
        run(shell, f'ADD "{temp_dir}"')
        capsys.readouterr()
        run(shell, "STATS")
        out = capsys.readouterr().out
        assert "Files:                4" in out
        assert "Potential duplicates: 2" in out

    def test_help_and_about(self, make_shell, capsys):
        shell = make_shell()
        run(shell, "H")
        run(shell, "ABOUT")
        out = capsys.readouterr().out
        assert "List of available commands" in out
        assert f"v {__version__}" in out

    def test_unknown_command(self, make_shell, capsys):
        shell = make_shell()
        assert run(shell, "FROBNICATE") is False
        assert STATUS_MESSAGES['unknown_command'] in capsys.readouterr().out

    def test_blank_line(self, make_shell):
        assert run(make_shell(), "") is False


class TestSaveAndExit:
    """Test SAVE and EXIT."""

    def test_save(self, make_shell, sample_images, capsys):
        shell = make_shell()
        run(shell, f'ADD "{sample_images["unique"]}"')
        run(shell, "SAVE")
        assert STATUS_MESSAGES['saved'] in capsys.readouterr().out
        assert shell.store.exists()
        assert not shell.catalog.dirty

    def test_save_without_changes(self, make_shell, capsys):
        shell = make_shell()
        run(shell, "SAVE")
        assert STATUS_MESSAGES['no_changes'] in capsys.readouterr().out
        assert not shell.store.exists()

    def test_save_failure(self, make_shell, sample_images, temp_dir, capsys):
        blocker = temp_dir / "blocker"
        blocker.write_text("a file, not a directory")
        shell = make_shell(store_path=blocker / "catalog.json")
        run(shell, f'ADD "{sample_images["unique"]}"')

        run(shell, "SAVE")

        assert STATUS_MESSAGES['write_error'] in capsys.readouterr().out
        assert shell.catalog.dirty

    def test_exit_clean(self, make_shell):
        assert run(make_shell(), "EXIT") is True

    def test_exit_save(self, make_shell, sample_images):
        shell = make_shell("y")
        run(shell, f'ADD "{sample_images["unique"]}"')
        assert run(shell, "X") is True
        assert shell.store.exists()

    def test_exit_discard(self, make_shell, sample_images):
        shell = make_shell("n")
        run(shell, f'ADD "{sample_images["unique"]}"')
        assert run(shell, "E") is True
        assert not shell.store.exists()

    def test_exit_cancel(self, make_shell, sample_images):
        shell = make_shell("cancel")
        run(shell, f'ADD "{sample_images["unique"]}"')
        assert run(shell, "EXIT") is False
        assert shell.catalog.dirty

    def test_exit_end_of_input_cancels(self, make_shell, sample_images):
        shell = make_shell()
        run(shell, f'ADD "{sample_images["unique"]}"')
        assert run(shell, "EXIT") is False

    def test_exit_save_failure_stays(self, make_shell, sample_images, temp_dir):
        blocker = temp_dir / "blocker"
        blocker.write_text("a file, not a directory")
        shell = make_shell("y", store_path=blocker / "catalog.json")
        run(shell, f'ADD "{sample_images["unique"]}"')
        assert run(shell, "EXIT") is False


class TestCLIOrchestrator:
    """Test whole CLI sessions."""

    def test_batch_commands(self, isolated_config, sample_images, temp_dir, capsys):
        db_file = temp_dir / "db" / "catalog.json"
        argv = [str(db_file), "--no-progress", "-c", f'ADD "{temp_dir}"', "-c", "SAVE"]

        assert CLIOrchestrator(argv).run() == 0

        out = capsys.readouterr().out
        assert "The catalog file does not exist" in out
        assert len(CatalogStore(db_file).load()) == 4

    def test_batch_reopens_saved_catalog(self, isolated_config, sample_images, temp_dir, capsys):
        db_file = temp_dir / "db" / "catalog.json"
        CLIOrchestrator([str(db_file), "--no-progress", "-c", f'ADD "{temp_dir}"', "-c", "SAVE"]).run()
        capsys.readouterr()

        assert CLIOrchestrator([str(db_file), "-c", "STATS"]).run() == 0

        out = capsys.readouterr().out
        assert "Catalog loaded." in out
        assert "Files:                4" in out

    def test_suffix_added_to_db_name(self, isolated_config, sample_images, temp_dir):
        db_name = temp_dir / "holidays"
        CLIOrchestrator([str(db_name), "--no-progress", "-c", f'ADD "{sample_images["unique"]}"', "-c", "SAVE"]).run()
        assert (temp_dir / "holidays.json").is_file()

    def test_corrupt_catalog_refused_in_batch(self, isolated_config, temp_dir, capsys):
        db_file = temp_dir / "catalog.json"
        db_file.write_text("{not json", encoding='utf-8')

        assert CLIOrchestrator([str(db_file), "-c", "SAVE"]).run() == 1

        assert "ERROR:" in capsys.readouterr().out
        assert db_file.read_text(encoding='utf-8') == "{not json"

    def test_configured_db_file(self, isolated_config, temp_dir, monkeypatch, capsys):
        db_file = temp_dir / "configured.json"
        monkeypatch.setenv('PHOTOCATALOG_DB_FILE', str(db_file))
        orchestrator = CLIOrchestrator(["-c", "STATS"])
        assert orchestrator.run() == 0
        assert orchestrator.store.path == db_file

    def test_interactive_session(self, isolated_config, sample_images, temp_dir, capsys):
        db_file = temp_dir / "db" / "catalog.json"
        session = scripted_input(f'ADD "{temp_dir}"', 'AK holiday "' + sample_images['exif'] + '"', "EXIT", "yes")

        assert CLIOrchestrator([str(db_file), "--no-progress"], input_func=session).run() == 0

        out = capsys.readouterr().out
        assert "Photo Catalog [v" in out
        loaded = CatalogStore(db_file).load()
        assert loaded.find_with_keyword("holiday") == {loaded.get_file_id(sample_images['exif'])}

    def test_interactive_end_of_input(self, isolated_config, sample_images, temp_dir):
        db_file = temp_dir / "db" / "catalog.json"
        session = scripted_input(f'ADD "{sample_images["unique"]}"')

        assert CLIOrchestrator([str(db_file), "--no-progress"], input_func=session).run() == 0
        assert not db_file.exists()
