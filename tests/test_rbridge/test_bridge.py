"""
Tests for rbridge.bridge module.

Most tests use a fake Rscript shell script (see conftest.py) so the whole
locate -> build -> run -> parse path is exercised without R installed.
"""
from __future__ import annotations

import asyncio
import shutil
import sys
import time
from unittest.mock import patch

import pytest

requires_posix_shell = pytest.mark.skipif(sys.platform == 'win32', reason="fake Rscript is a POSIX shell script")
requires_r = pytest.mark.skipif(shutil.which('Rscript') is None, reason="Rscript not installed")


@requires_posix_shell
class TestExecuteRCommand:
    """Tests for expression evaluation."""

    def test_output_is_parsed(self, printing_rscript_dir):
        from rbridge.bridge import RBridge

        bridge = RBridge(str(printing_rscript_dir(stdout='[1] "hello"\n')), platform='lin')

        assert bridge.execute_r_command('print("hello")') == ['hello']

    def test_expression_is_passed_with_e_flag(self, echo_rscript_dir):
        from rbridge.bridge import RBridge

        bridge = RBridge(str(echo_rscript_dir), platform='lin')

        assert bridge.execute_r_command('print(1+1)') == ['print(1+1)']

    def test_stderr_without_stdout_raises(self, printing_rscript_dir):
        """A script with no stdout fails with its stderr attached."""
        from rbridge.bridge import RBridge
        from rbridge.errors import RScriptError

        bridge = RBridge(str(printing_rscript_dir(stderr='Warning: nothing printed\n')), platform='lin')

        with pytest.raises(RScriptError) as exc_info:
            bridge.execute_r_command('invisible(1)')

        assert exc_info.value.diagnostic == 'Warning: nothing printed\n'
        assert 'nothing printed' in str(exc_info.value)

    def test_failing_process_raises(self, printing_rscript_dir):
        from rbridge.bridge import RBridge
        from rbridge.errors import BaseRIntegrationError, RScriptError

        bridge = RBridge(str(printing_rscript_dir(stderr='Error: object not found\n', status=1)), platform='lin')

        with pytest.raises(RScriptError, match="object not found") as exc_info:
            bridge.execute_r_command('print(x)')

        assert isinstance(exc_info.value, BaseRIntegrationError)

    def test_undecodable_output_is_replaced(self, printing_rscript_dir):
        """Non-UTF-8 bytes from R are replaced instead of raising."""
        from rbridge.bridge import RBridge

        bridge = RBridge(str(printing_rscript_dir(stdout=b'[1] "caf\xe9"\n')), platform='lin')

        assert bridge.execute_r_command('print(x)') == ['caf\ufffd']

    def test_missing_engine_propagates(self, temp_dir):
        from rbridge.bridge import RBridge
        from rbridge.errors import REngineNotFoundError

        bridge = RBridge(str(temp_dir / 'nowhere'), platform='lin')

        with patch('rbridge.bridge.run_sync') as run:
            with pytest.raises(REngineNotFoundError):
                bridge.execute_r_command('print(1)')

        run.assert_not_called()


@requires_posix_shell
class TestExecuteRCommandAsync:
    """Tests for asynchronous expression evaluation."""

    @pytest.mark.asyncio
    async def test_output_is_parsed(self, printing_rscript_dir):
        from rbridge.bridge import RBridge

        bridge = RBridge(str(printing_rscript_dir(stdout='[1] NA\n')), platform='lin')

        assert await bridge.execute_r_command_async('print(NA)') == [None]

    @pytest.mark.asyncio
    async def test_undecodable_output_matches_sync(self, printing_rscript_dir):
        from rbridge.bridge import RBridge

        bridge = RBridge(str(printing_rscript_dir(stdout=b'[1] "caf\xe9"\n')), platform='lin')

        assert await bridge.execute_r_command_async('print(x)') == bridge.execute_r_command('print(x)')

    @pytest.mark.asyncio
    async def test_locate_does_not_block_event_loop(self, echo_rscript_dir):
        """Other tasks keep running while Rscript is being located."""
        from rbridge.bridge import RBridge

        rscript = str(echo_rscript_dir / 'Rscript')

        def slow_locate(*args, **kwargs):
            time.sleep(0.5)
            return rscript

        loop = asyncio.get_running_loop()
        done = asyncio.Event()
        gaps = []

        async def ticker():
            last = loop.time()
            while not done.is_set():
                await asyncio.sleep(0.02)
                now = loop.time()
                gaps.append(now - last)
                last = now

        bridge = RBridge(platform='lin')
        tick_task = asyncio.create_task(ticker())
        with patch('rbridge.bridge.locate_rscript', side_effect=slow_locate):
            result = await bridge.execute_r_command_async('print(1)')
        done.set()
        await tick_task

        assert result == ['print(1)']
        assert len(gaps) >= 10
        assert max(gaps) < 0.25

    @pytest.mark.asyncio
    async def test_failing_process_raises(self, printing_rscript_dir):
        from rbridge.bridge import RBridge
        from rbridge.errors import RScriptError

        bridge = RBridge(str(printing_rscript_dir(stderr='Error: boom\n', status=1)), platform='lin')

        with pytest.raises(RScriptError) as exc_info:
            await bridge.execute_r_command_async('stop("boom")')

        assert 'Command failed' in exc_info.value.diagnostic
        assert 'Error: boom' in exc_info.value.diagnostic


@requires_posix_shell
class TestExecuteRScript:
    """Tests for script file execution."""

    def test_script_output_is_parsed(self, echo_rscript_dir, temp_dir):
        from rbridge.bridge import RBridge

        script = temp_dir / 'report.R'
        script.write_text('[1] "done"\n')
        bridge = RBridge(str(echo_rscript_dir), platform='lin')

        assert bridge.execute_r_script(str(script)) == ['done']

    def test_missing_file_raises_before_running(self, temp_dir):
        from rbridge.bridge import RBridge

        bridge = RBridge(platform='lin')

        with patch('rbridge.bridge.locate_rscript') as locate, patch('rbridge.bridge.run_sync') as run:
            with pytest.raises(FileNotFoundError, match="doesn't exist"):
                bridge.execute_r_script(str(temp_dir / 'missing.R'))

        locate.assert_not_called()
        run.assert_not_called()


@requires_posix_shell
class TestCallMethod:
    """Tests for function calls."""

    def test_call_standard_method(self, echo_rscript_dir):
        from rbridge.bridge import RBridge

        bridge = RBridge(str(echo_rscript_dir), platform='lin')

        result = bridge.call_standard_method('mean', {'x': [1, 2, None], 'na.rm': True})

        assert result == ['print(mean(x=c(1,2,NA),na.rm=TRUE))']

    def test_call_method_sources_file(self, echo_rscript_dir):
        from rbridge.bridge import RBridge

        bridge = RBridge(str(echo_rscript_dir), platform='lin')

        result = bridge.call_method('lib.R', 'paste', ['a', 'b'])

        assert result == ["source('lib.R');", "print(paste('a','b'))"]

    @pytest.mark.asyncio
    async def test_call_method_async(self, echo_rscript_dir):
        from rbridge.bridge import RBridge

        bridge = RBridge(str(echo_rscript_dir), platform='lin')

        result = await bridge.call_method_async('lib.R', 'f', [1])

        assert result == ["source('lib.R');", 'print(f(1))']

    @pytest.mark.parametrize("args", [
        ('', 'f', [1]),
        ('lib.R', '', [1]),
        ('lib.R', 'f', None),
    ])
    def test_call_method_validation(self, args):
        """Missing arguments fail before anything is run."""
        from rbridge.bridge import RBridge

        bridge = RBridge(platform='lin')

        with patch('rbridge.bridge.locate_rscript') as locate, patch('rbridge.bridge.run_sync') as run:
            with pytest.raises(ValueError):
                bridge.call_method(*args)

        locate.assert_not_called()
        run.assert_not_called()

    def test_call_standard_method_validation(self):
        from rbridge.bridge import RBridge

        bridge = RBridge(platform='lin')

        with patch('rbridge.bridge.locate_rscript') as locate:
            with pytest.raises(ValueError):
                bridge.call_standard_method('', [1])

        locate.assert_not_called()


@requires_posix_shell
class TestModuleFunctions:
    """Tests for the module-level shortcuts."""

    def test_execute_r_command(self, echo_rscript_dir):
        from rbridge import execute_r_command

        assert execute_r_command('print(3)', str(echo_rscript_dir)) == ['print(3)']

    def test_call_standard_method(self, echo_rscript_dir):
        from rbridge import call_standard_method

        assert call_standard_method('sum', [1, 2], str(echo_rscript_dir)) == ['print(sum(1,2))']

    def test_call_method(self, echo_rscript_dir):
        from rbridge import call_method

        result = call_method('lib.R', 'g', {'n': 2}, str(echo_rscript_dir))

        assert result[-1] == 'print(g(n=2))'

    @pytest.mark.asyncio
    async def test_execute_r_command_async(self, echo_rscript_dir):
        from rbridge import execute_r_command_async

        assert await execute_r_command_async('print(4)', str(echo_rscript_dir)) == ['print(4)']

    def test_execute_r_script(self, echo_rscript_dir, temp_dir):
        from rbridge import execute_r_script

        script = temp_dir / 'one.R'
        script.write_text('[1] 1\n')

        assert execute_r_script(str(script), str(echo_rscript_dir)) == [1]


@requires_r
class TestRealR:
    """End-to-end tests against an installed R."""

    def test_standard_method(self):
        from rbridge import call_standard_method

        assert call_standard_method('sum', [[1, 2, 3]]) == [6]

    def test_script(self, r_script_file):
        from rbridge import execute_r_script

        assert execute_r_script(str(r_script_file)) == [42]

    def test_call_method(self, r_script_file):
        from rbridge import call_method

        result = call_method(str(r_script_file), 'add_one', [1])

        assert result[-1] == '2'

    def test_script_error(self):
        from rbridge import RScriptError, execute_r_command

        with pytest.raises(RScriptError):
            execute_r_command("stop('failure')")

    @pytest.mark.asyncio
    async def test_async(self):
        from rbridge import execute_r_command_async

        assert await execute_r_command_async('print(2^10)') == [1024]
