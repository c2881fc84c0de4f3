import io

from jester.ui.colors import ERROR_FG, RESET, colorize, color_enabled


class TtyStream(io.StringIO):
    def isatty(self):
        return True


def test_color_follows_destination_stream(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    tty, redirected = TtyStream(), io.StringIO()
    monkeypatch.setattr("sys.stdout", redirected)

    assert colorize("boom", ERROR_FG, stream=tty) == f"{ERROR_FG}boom{RESET}"
    assert colorize("boom", ERROR_FG, stream=redirected) == "boom"
    # Default destination is stdout
    assert colorize("boom", ERROR_FG) == "boom"


def test_redirected_destination_gets_no_codes_even_if_stdout_is_tty(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setattr("sys.stdout", TtyStream())
    assert colorize("warn", ERROR_FG, stream=io.StringIO()) == "warn"


def test_no_color_env_disables_colors(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    assert color_enabled(TtyStream()) is False
    assert colorize("x", ERROR_FG, stream=TtyStream()) == "x"
