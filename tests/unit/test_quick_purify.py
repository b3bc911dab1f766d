"""
Unit tests for the quick_purify command line tool
"""
import io
import json
import pytest

import quick_purify
from core.purification.pipeline import PurificationPipeline


@pytest.fixture(autouse=True)
def offline_pipeline(monkeypatch):
    """Pipeline without providers, so nothing reaches the network"""
    monkeypatch.setattr(
        quick_purify.PurificationPipeline,
        "from_settings",
        lambda *args, **kwargs: PurificationPipeline(),
    )


class TestQuickPurify:

    def test_prints_purified_text(self, capsys):
        assert quick_purify.main(["Bonjour", "--target", "fr", "--source", "fr"]) == 0
        assert capsys.readouterr().out.strip() == "Bonjour"

    def test_json_output(self, capsys):
        assert quick_purify.main(["الشهود Defined في المادة", "-t", "ar", "-s", "fr", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {
            "text": "الشهود في المادة",
            "purity_score": 100.0,
            "path": "sanitized",
        }

    def test_reads_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("Bonjour"))
        assert quick_purify.main(["-t", "fr", "-s", "fr"]) == 0
        assert capsys.readouterr().out.strip() == "Bonjour"

    def test_unknown_target(self, capsys):
        assert quick_purify.main(["Bonjour", "--target", "de"]) == 2
        assert "Unsupported" in capsys.readouterr().err

    def test_target_is_required(self):
        with pytest.raises(SystemExit):
            quick_purify.main(["Bonjour"])

    def test_content_type_choices(self):
        with pytest.raises(SystemExit):
            quick_purify.main(["Bonjour", "-t", "fr", "-c", "tooltip"])
