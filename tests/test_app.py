import csv

import app
from conftest import FakeClient
from stockmeta.errors import ProviderError
from stockmeta.metadata_processor import generate


def _patch_generate(monkeypatch, client):
    def fake_generate(filenames, api_key, platform, **kwargs):
        kwargs.pop("provider_name", None)
        kwargs.pop("model", None)
        return generate(filenames, api_key, platform, client=client, **kwargs)

    monkeypatch.setattr(app, "generate", fake_generate)


def test_generate_command_writes_csv(settings_db, monkeypatch, tmp_path, fake_client):
    _patch_generate(monkeypatch, fake_client)
    output = tmp_path / "out.csv"
    code = app.main(["generate", "expand-icon.svg", "--platform", "adobe",
                     "--api-key", "sk-test", "--output", str(output)])
    assert code == 0
    with open(output, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[1] == ["expand-icon.svg", "Expand arrows icon", "expand, arrow, resize", "3", ""]


def test_generate_command_uses_saved_key(settings_db, monkeypatch, tmp_path, fake_client):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    _patch_generate(monkeypatch, fake_client)
    assert app.main(["set-key", "sk-saved"]) == 0
    code = app.main(["generate", "a.svg", "--platform", "shutterstock", "--output", str(tmp_path / "o.csv")])
    assert code == 0
    assert fake_client.tasks_for("a.svg")


def test_generate_command_without_key_fails(settings_db, monkeypatch, tmp_path, fake_client):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    _patch_generate(monkeypatch, fake_client)
    code = app.main(["generate", "a.svg", "--output", str(tmp_path / "o.csv")])
    assert code == 1
    assert fake_client.calls == []


def test_generate_command_reports_item_errors(settings_db, monkeypatch, tmp_path):
    client = FakeClient(answers={"title": "t", "keywords": "k", "category": "1"},
                        failures={"b.svg": ProviderError("down")})
    _patch_generate(monkeypatch, client)
    output = tmp_path / "o.csv"
    code = app.main(["generate", "a.svg", "b.svg", "--api-key", "sk", "--output", str(output)])
    assert code == 2
    assert output.read_text(encoding="utf-8").count("\n") == 2


def test_set_key_clear(settings_db):
    app.main(["set-key", "sk-saved", "--provider", "Groq"])
    assert settings_db.get_setting(settings_db.SETTING_PROVIDER) == "Groq"
    app.main(["set-key", "--clear"])
    assert settings_db.get_setting(settings_db.SETTING_API_KEY) == ""
