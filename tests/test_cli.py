import base64
import json

import pytest
from openai import OpenAIError

from logo_studio import cli, config
from logo_studio.services.logo_generator import LogoGenerator


@pytest.fixture
def usage_file(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DAILY_LIMIT", 5)
    monkeypatch.setattr(config, "CLIENT_API_KEY", None)
    return tmp_path / "usage.json"


@pytest.fixture
def use_fake(fake_openai, monkeypatch):
    def _use(**kwargs):
        fake = fake_openai(**kwargs)
        monkeypatch.setattr(cli, "LogoGenerator", lambda key: LogoGenerator(key, client=fake))
        return fake

    return _use


def run(usage_file, *args):
    return cli.cli_main(["--usage-file", str(usage_file), *args])


def test_prints_concept_and_records_usage(usage_file, use_fake, capsys):
    fake = use_fake(text="Fox Brew concept")

    assert run(usage_file, "--api-key", "key", "--prompt", "A fox, for coffee", "--style", "Neon") == 0

    out = capsys.readouterr()
    assert "Fox Brew concept" in out.out
    assert "Daily generations remaining: 4" in out.err
    assert "in a neon style." in fake.calls[0][1]["input"]


def test_image_is_saved(usage_file, use_fake, tmp_path, capsys):
    use_fake(image_b64=base64.b64encode(b"png").decode("ascii"))
    out_dir = tmp_path / "logos"

    assert run(usage_file, "--api-key", "key", "--image", "--out-dir", str(out_dir)) == 0

    saved = list(out_dir.glob("logo_*.png"))
    assert len(saved) == 1
    assert saved[0].read_bytes() == b"png"
    assert "Daily generations remaining: 3" in capsys.readouterr().err


def test_missing_key_exits_with_error(usage_file, use_fake, capsys):
    use_fake()

    assert run(usage_file) == 1
    assert "API Key is missing" in capsys.readouterr().err
    assert not usage_file.exists()


def test_provider_error_is_reported_and_rolled_back(usage_file, use_fake, capsys):
    use_fake(error=OpenAIError("API key not valid. Please pass a valid API key."))

    assert run(usage_file, "--api-key", "bad") == 1

    err = capsys.readouterr().err
    assert "The API key is not valid." in err
    assert "Daily generations remaining: 5" in err


def test_daily_limit_is_enforced_across_runs(usage_file, use_fake, capsys):
    use_fake()
    for _ in range(5):
        assert run(usage_file, "--api-key", "key") == 0

    assert run(usage_file, "--api-key", "key") == 1
    assert "daily limit of 5 logo concepts" in capsys.readouterr().err


def test_remaining_and_reset(usage_file, use_fake, capsys):
    use_fake()
    run(usage_file, "--api-key", "key")
    capsys.readouterr()

    assert run(usage_file, "--remaining") == 0
    assert "Daily generations remaining: 4" in capsys.readouterr().out

    assert run(usage_file, "--reset-usage") == 0
    assert "remaining: 5" in capsys.readouterr().out
    assert json.loads(usage_file.read_text(encoding="utf-8")) == {}


def test_unexpected_failure_is_reported_without_traceback(usage_file, use_fake, capsys):
    use_fake(error=RuntimeError("connection dropped"))

    assert run(usage_file, "--api-key", "key") == 1

    err = capsys.readouterr().err
    assert "Oops! Something went wrong. Generation was interrupted. (connection dropped)" in err
    assert "Daily generations remaining: 5" in err


def test_undecodable_image_is_reported(usage_file, use_fake, tmp_path, capsys):
    use_fake(image_b64="abc")

    assert run(usage_file, "--api-key", "key", "--image", "--out-dir", str(tmp_path / "logos")) == 1

    assert "Oops! Something went wrong. An unknown error occurred." in capsys.readouterr().err


def test_exhausted_quota_skips_generation(usage_file, use_fake, capsys):
    fake = use_fake()
    for _ in range(5):
        run(usage_file, "--api-key", "key")
    calls_before = len(fake.calls)
    capsys.readouterr()

    assert run(usage_file, "--api-key", "key") == 1

    assert len(fake.calls) == calls_before
    assert "daily limit of 5 logo concepts" in capsys.readouterr().err
