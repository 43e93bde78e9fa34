"""
Tests for the Command Line Entry Point

Tests for storia/__main__.py
"""

import httpx
import pytest

import storia.generation
from storia.__main__ import build_parser, main
from storia.core.logging_config import setup_logging
from storia.generation.client import GenerationAPIClient


@pytest.fixture
def quiet_logging(capsys):
    yield
    # Drop handlers bound to the captured stdout
    setup_logging(console_output=False)


def patch_client(monkeypatch, handler):
    def factory(base_url=None, kind=None):
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
        return GenerationAPIClient(base_url="http://test", kind=kind, client=http)

    monkeypatch.setattr(storia.generation, "GenerationAPIClient", factory)


class TestParser:
    """Tests for argument parsing."""

    def test_watch_arguments(self):
        args = build_parser().parse_args(["watch", "c1", "--kind", "video", "--interval", "0.5"])

        assert args.command == "watch"
        assert args.campaign_id == "c1"
        assert args.kind == "video"
        assert args.interval == 0.5
        assert args.topics is None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_unknown_kind_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["watch", "c1", "--kind", "audio"])


class TestWatch:
    """Tests for the watch command."""

    def test_watch_until_done(self, monkeypatch, capsys, quiet_logging):
        def handler(request):
            return httpx.Response(200, json={
                "success": True,
                "progress": {"campaign_id": "c1", "status": "completed", "total": 3, "completed": 3},
            })

        patch_client(monkeypatch, handler)

        assert main(["watch", "c1", "--interval", "0.01"]) == 0
        out = capsys.readouterr().out
        assert "done" in out
        assert "3/3 done" in out

    def test_watch_failed_job(self, monkeypatch, capsys, quiet_logging):
        def handler(request):
            return httpx.Response(200, json={
                "success": True,
                "progress": {
                    "campaign_id": "c1",
                    "status": "failed",
                    "total": 1,
                    "failed": 1,
                    "item_statuses": {"0": {"status": "failed", "error": "provider timeout"}},
                },
            })

        patch_client(monkeypatch, handler)

        assert main(["watch", "c1", "--interval", "0.01"]) == 1
        assert "provider timeout" in capsys.readouterr().out

    def test_watch_starts_generation(self, monkeypatch, capsys, quiet_logging):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            if request.url.path.endswith("/generate"):
                return httpx.Response(200, json={
                    "success": True, "started": True, "campaign_id": "c1", "message": "Started"
                })
            return httpx.Response(200, json={
                "success": True,
                "progress": {"campaign_id": "c1", "status": "review", "total": 1, "completed": 1},
            })

        patch_client(monkeypatch, handler)

        assert main(["watch", "c1", "--kind", "video", "--topics", "ocean", "--interval", "0.01"]) == 0
        assert paths[0] == "/api/autoproduction/video/c1/generate"

    def test_rejected_start(self, monkeypatch, capsys, quiet_logging):
        def handler(request):
            return httpx.Response(400, json={"detail": "No topics in campaign"})

        patch_client(monkeypatch, handler)

        assert main(["watch", "c1", "--topics", "ocean"]) == 1
        assert "No topics in campaign" in capsys.readouterr().out
