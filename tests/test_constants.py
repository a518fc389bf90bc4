from xdcc_engine.constants import _get_env_float, _get_env_int


def test_get_env_int_valid_positive_integer(monkeypatch):
    """Test parsing a valid positive integer from environment variable."""
    monkeypatch.setenv("TEST_VAR", "123")
    assert _get_env_int("TEST_VAR", 999) == 123


def test_get_env_int_invalid_string(monkeypatch, capsys):
    """Test handling of invalid string value in environment variable."""
    monkeypatch.setenv("TEST_VAR", "abc")
    assert _get_env_int("TEST_VAR", 999) == 999
    assert "Invalid integer value for TEST_VAR" in capsys.readouterr().out


def test_get_env_int_unset(monkeypatch):
    monkeypatch.delenv("TEST_VAR", raising=False)
    assert _get_env_int("TEST_VAR", 5) == 5


def test_get_env_float_valid(monkeypatch):
    monkeypatch.setenv("TEST_VAR", "2.5")
    assert _get_env_float("TEST_VAR", 1.0) == 2.5


def test_get_env_float_invalid(monkeypatch):
    monkeypatch.setenv("TEST_VAR", "soon")
    assert _get_env_float("TEST_VAR", 1.0) == 1.0
