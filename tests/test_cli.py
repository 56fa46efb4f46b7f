"""Tests for the command-line front end."""

import io
import json

import pytest

from mordicus.cli import _build_parser, main
from mordicus.config import GameConfig, GameType
from mordicus.levels import LevelCatalog


@pytest.fixture()
def levels_file(tmp_path, make_rows):
    path = tmp_path / "levels.json"
    path.write_text(
        json.dumps(
            {
                "original": [make_rows("P.C"), make_rows(".P.R", "C...")],
                "custom": [make_rows("C.P")],
            },
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    return path


def _play(levels_file, commands, *extra):
    out = io.StringIO()
    code = main(
        ["--levels", str(levels_file), "play", *extra],
        stdin=io.StringIO("\n".join(commands) + "\n"),
        out=out,
    )
    return code, out.getvalue()


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_play_defaults(self):
        args = _build_parser().parse_args(["play"])
        assert args.command == "play"
        assert args.password is None
        assert args.level_type is None
        assert not args.resume
        assert args.store is None

    def test_global_flags(self):
        args = _build_parser().parse_args(
            ["--store", "s.json", "--levels", "l.json", "-v", "passwords"],
        )
        assert args.store == "s.json"
        assert args.levels == "l.json"
        assert args.verbose
        assert args.level_type == "original"

    def test_rejects_unknown_level_type(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["passwords", "--level-type", "bonus"])


class TestCLIPlay:
    def test_complete_then_capture(self, levels_file):
        code, output = _play(levels_file, ["d", "d", "n", "d", "q"])
        assert code == 0
        assert "STAGE 001  SCORE 000000  BONUS 1000  LIVES 05" in output
        assert "LEVEL COMPLETE. BEST BONUS 0990. r=retry n=next" in output
        assert "STAGE 002  SCORE 001990" in output
        assert "TRY AGAIN! r=retry" in output

    def test_arrow_words_and_ignored_input(self, levels_file):
        code, output = _play(levels_file, ["right", "jump", "up"])
        assert code == 0
        assert "BONUS 0995" in output
        assert "Ignored: jump" in output

    def test_game_complete(self, tmp_path, make_rows):
        path = tmp_path / "one.json"
        path.write_text(
            json.dumps({"original": [make_rows("P.C")]}, ensure_ascii=False),
            encoding="utf-8",
        )
        _, output = _play(path, ["d", "d", "n", "d"])
        assert "CONGRATULATIONS! FINAL SCORE 001990" in output
        assert "Ignored: d" not in output

    def test_game_over(self, levels_file):
        password = LevelCatalog.from_file(levels_file).first_level().password
        _, output = _play(levels_file, ["x", "r"] * 4 + ["x"])
        assert f"GAME OVER. PASSWORD: {password}" in output

    def test_start_from_password(self, levels_file):
        password = LevelCatalog.from_file(levels_file).find_by_stage(2).password
        code, output = _play(levels_file, ["q"], "--password", password)
        assert code == 0
        assert output.startswith("STAGE 002")

    def test_unknown_password(self, levels_file):
        code, output = _play(levels_file, [], "--password", "000000")
        assert code == 2
        assert "No level found" in output

    def test_level_type_without_password(self, levels_file, make_rows):
        code, output = _play(levels_file, ["q"], "--level-type", "custom")
        assert code == 0
        custom_row = "".join(make_rows("C.P")[0])
        original_row = "".join(make_rows("P.C")[0])
        lines = output.splitlines()
        assert lines[1] == custom_row
        assert original_row not in output

    def test_empty_level_type(self, tmp_path, make_rows):
        path = tmp_path / "one.json"
        path.write_text(
            json.dumps({"original": [make_rows("P.C")]}, ensure_ascii=False),
            encoding="utf-8",
        )
        code, output = _play(path, ["q"], "--level-type", "custom")
        assert code == 2
        assert "No custom levels loaded." in output

    def test_continue_from_saved_checkpoint(self, levels_file, tmp_path):
        store = str(tmp_path / "store.json")
        main(
            ["--store", store, "--levels", str(levels_file), "play"],
            stdin=io.StringIO("d\nd\nn\nq\n"),
            out=io.StringIO(),
        )

        out = io.StringIO()
        main(
            ["--store", store, "--levels", str(levels_file), "play", "--continue"],
            stdin=io.StringIO("q\n"),
            out=out,
        )
        assert out.getvalue().startswith("STAGE 002")

        out = io.StringIO()
        main(
            ["--store", store, "--levels", str(levels_file), "play"],
            stdin=io.StringIO("q\n"),
            out=out,
        )
        assert out.getvalue().startswith("STAGE 001")

    def test_continue_without_checkpoint(self, levels_file):
        _, output = _play(levels_file, ["q"], "--continue")
        assert output.startswith("STAGE 001")

    def test_progress_saved_to_store(self, levels_file, tmp_path):
        store_path = tmp_path / "store.json"
        out = io.StringIO()
        main(
            ["--store", str(store_path), "--levels", str(levels_file), "play"],
            stdin=io.StringIO("d\nd\nn\nq\n"),
            out=out,
        )
        saved = json.loads(store_path.read_text())
        stage2 = LevelCatalog.from_file(levels_file).find_by_stage(2).password
        assert saved["last-level-password"] == stage2


class TestCLIPasswords:
    def test_lists_every_stage(self, levels_file):
        out = io.StringIO()
        assert main(["--levels", str(levels_file), "passwords"], out=out) == 0
        lines = out.getvalue().splitlines()
        catalog = LevelCatalog.from_file(levels_file)
        assert lines == [
            f"original level #{lv.stage} password: {lv.password}"
            for lv in catalog.levels()
        ]


class TestCLIConfig:
    def test_show_default(self):
        out = io.StringIO()
        assert main(["config"], out=out) == 0
        assert "game_type: remake" in out.getvalue()

    def test_toggle_persists(self, tmp_path):
        store = str(tmp_path / "store.json")
        out = io.StringIO()
        main(["--store", store, "config", "--toggle"], out=out)
        assert "game_type: original" in out.getvalue()
        assert "undo_move_enabled: False" in out.getvalue()

        out = io.StringIO()
        main(["--store", store, "config"], out=out)
        assert "game_type: original" in out.getvalue()

        out = io.StringIO()
        main(["--store", store, "config", "--toggle"], out=out)
        assert "game_type: remake" in out.getvalue()

    def test_save(self, tmp_path):
        path = tmp_path / "rules.json"
        main(["config", "--save", str(path)], out=io.StringIO())
        assert GameConfig.load(path).game_type == GameType.REMAKE
