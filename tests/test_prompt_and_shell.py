"""Tests for the prompt mediator and the shell executor."""

import asyncio
import sys

import pytest

from actionhost.actions.shell import ShellExecutor, build_command, escape_shell_arg
from actionhost.errors import PromptBusyError, PromptUnavailableError
from actionhost.prompt import (
    PromptAPI,
    PromptRequest,
    SelectChoice,
    is_prompt_pending,
    set_prompt_handler,
)


class TestPromptAPI:
    """Tests for prompt routing."""

    def test_unavailable_without_handler(self):
        with pytest.raises(PromptUnavailableError):
            asyncio.run(PromptAPI().text("Name?"))

    def test_routes_to_handler(self):
        requests = []

        async def handler(request: PromptRequest):
            requests.append(request)
            return {"text": "Ann", "confirm": "yes", "number": "2.0", "select": "b"}[request.kind]

        set_prompt_handler(handler)
        api = PromptAPI()

        assert asyncio.run(api.text("Name?", default="x")) == "Ann"
        assert asyncio.run(api.confirm("Sure?")) is True
        assert asyncio.run(api.number("How many?")) == 2
        assert asyncio.run(api.select("Pick", ["a", {"label": "B", "value": "b"}])) == "b"

        assert requests[0].options == {"default": "x"}
        assert requests[3].choices == [SelectChoice("a", "a"), SelectChoice("B", "b")]
        assert not is_prompt_pending()

    def test_number_bounds(self):
        async def handler(request):
            return "10"

        set_prompt_handler(handler)
        with pytest.raises(ValueError):
            asyncio.run(PromptAPI().number("n", max=5))

    def test_second_concurrent_prompt_is_rejected(self):
        async def scenario():
            release = asyncio.Event()

            async def handler(request):
                await release.wait()
                return "first"

            set_prompt_handler(handler)
            api = PromptAPI()
            first = asyncio.ensure_future(api.text("one"))
            await asyncio.sleep(0)
            assert is_prompt_pending()

            with pytest.raises(PromptBusyError):
                await api.text("two")

            release.set()
            return await first

        assert asyncio.run(scenario()) == "first"
        assert not is_prompt_pending()

    def test_pending_flag_cleared_on_handler_error(self):
        async def handler(request):
            raise RuntimeError("terminal closed")

        set_prompt_handler(handler)
        with pytest.raises(RuntimeError):
            asyncio.run(PromptAPI().password("secret"))
        assert not is_prompt_pending()


class TestBuildCommand:
    """Tests for build_command."""

    def test_placeholders_are_escaped(self):
        assert build_command("git log -n {}", 5) == "git log -n 5"
        assert build_command("echo {} {}", "a b", "it's") == "echo 'a b' 'it'\"'\"'s'"

    def test_args_appended_without_placeholders(self):
        assert build_command("ls", "-la", "my dir") == "ls -la 'my dir'"

    def test_braces_untouched_without_args(self):
        assert build_command("awk '{print $1}'") == "awk '{print $1}'"

    def test_placeholder_count_mismatch(self):
        with pytest.raises(ValueError):
            build_command("cp {} {}", "only-one")

    def test_escape_shell_arg(self):
        assert escape_shell_arg("simple-arg_1.txt") == "simple-arg_1.txt"
        assert escape_shell_arg("$(rm -rf /)") == "'$(rm -rf /)'"


@pytest.mark.skipif(sys.platform == "win32", reason="requires /bin/sh")
class TestShellExecutor:
    """Tests for ShellExecutor."""

    def test_captures_output(self, tmp_path):
        result = asyncio.run(ShellExecutor(cwd=tmp_path)("echo {}", "hello world"))
        assert result.ok
        assert result.stdout == "hello world"

    def test_nonzero_exit_is_a_result(self, tmp_path):
        result = asyncio.run(ShellExecutor(cwd=tmp_path)("echo oops >&2; exit 3"))
        assert result.exit_code == 3
        assert not result.ok
        assert result.stderr == "oops"

    def test_runs_in_cwd(self, tmp_path):
        result = asyncio.run(ShellExecutor(cwd=tmp_path)("pwd"))
        assert result.stdout == str(tmp_path.resolve()) or result.stdout == str(tmp_path)
