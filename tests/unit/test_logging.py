import asyncio
import logging
from io import StringIO

import pytest

from ai_router.core.logging import (
    NOISY_HTTP_LOGGERS,
    ConversationLogger,
    CorrelationFormatter,
    HttpRequestLogDowngradeFilter,
    configure_root_logging,
    current_correlation_id,
    normalize_log_level,
    set_noisy_http_logger_levels,
)


def _record(msg: str = "hello", args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestHttpRequestLogDowngradeFilter:
    def setup_method(self) -> None:
        self.stream = StringIO()
        self.handler = logging.StreamHandler(self.stream)
        self.handler.setFormatter(logging.Formatter("%(levelname)s:%(message)s"))
        self.handler.addFilter(HttpRequestLogDowngradeFilter(*NOISY_HTTP_LOGGERS))

    def _emit(self, logger_name: str, level: int, message: str) -> str:
        logger = logging.getLogger(logger_name)
        logger.handlers = [self.handler]
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.log(level, message)
        self.handler.flush()
        output = self.stream.getvalue()
        self.stream.truncate(0)
        self.stream.seek(0)
        return output

    def test_downgrades_noisy_http_info_logs(self):
        output = self._emit("httpx.client", logging.INFO, "HTTP Request: POST")
        assert output.startswith("DEBUG:HTTP Request: POST")

    def test_preserves_non_noisy_info_logs(self):
        output = self._emit("ai_router.engine", logging.INFO, "Routing request")
        assert output.startswith("INFO:Routing request")

    def test_warnings_untouched(self):
        output = self._emit("httpcore", logging.WARNING, "retrying")
        assert output.startswith("WARNING:retrying")


class TestNoisyHttpLoggerLevelSetter:
    def test_sets_warning_by_default(self):
        set_noisy_http_logger_levels("INFO")
        for name in NOISY_HTTP_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_stays_debug_when_global_debug(self):
        set_noisy_http_logger_levels("DEBUG")
        for name in NOISY_HTTP_LOGGERS:
            assert logging.getLogger(name).level == logging.DEBUG


class TestCorrelationFormatter:
    def test_adds_correlation_id(self):
        formatter = CorrelationFormatter("%(message)s")
        record = _record()
        record.correlation_id = "1234567890"

        assert formatter.format(record).startswith("[12345678] hello")

    def test_record_itself_is_not_modified(self):
        formatter = CorrelationFormatter("%(message)s")
        record = _record("value=%s", ("x",))
        record.correlation_id = "abcdefghij"

        assert formatter.format(record) == "[abcdefgh] value=x"
        assert record.msg == "value=%s"
        assert record.args == ("x",)

    def test_no_prefix_without_correlation(self):
        assert CorrelationFormatter("%(message)s").format(_record()) == "hello"


class TestCorrelationContext:
    def test_records_carry_id_inside_context_only(self):
        with ConversationLogger.correlation_context("req-1"):
            assert current_correlation_id() == "req-1"
            inside = logging.getLogRecordFactory()(
                "t", logging.INFO, __file__, 1, "m", (), None
            )
        outside = logging.getLogRecordFactory()("t", logging.INFO, __file__, 1, "m", (), None)

        assert inside.correlation_id == "req-1"
        assert not hasattr(outside, "correlation_id")
        assert current_correlation_id() is None

    def test_nested_contexts_restore_outer_id(self):
        with ConversationLogger.correlation_context("outer"):
            with ConversationLogger.correlation_context("inner"):
                assert current_correlation_id() == "inner"
            assert current_correlation_id() == "outer"

    @pytest.mark.asyncio
    async def test_concurrent_tasks_keep_their_own_ids(self):
        seen = {}

        async def worker(request_id: str) -> None:
            with ConversationLogger.correlation_context(request_id):
                await asyncio.sleep(0.01)
                seen[request_id] = current_correlation_id()

        await asyncio.gather(worker("a"), worker("b"), worker("c"))

        assert seen == {"a": "a", "b": "b", "c": "c"}


class TestNormalizeLogLevel:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("debug", "DEBUG"),
            ("WARNING  # noisy", "WARNING"),
            ("", "INFO"),
            ("verbose", "INFO"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_log_level(raw) == expected


class TestConfigureRootLogging:
    def test_installs_single_correlation_handler(self):
        handler = configure_root_logging("debug")

        root = logging.getLogger()
        assert root.handlers == [handler]
        assert isinstance(handler.formatter, CorrelationFormatter)
        assert root.level == logging.DEBUG
        assert logging.getLogger("uvicorn").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_invalid_level_defaults_to_info(self):
        configure_root_logging("loud")

        assert logging.getLogger().level == logging.INFO

    def teardown_method(self):
        # configure_root_logging mutates global logging state
        logging.getLogger().handlers.clear()
        logging.getLogger().setLevel(logging.WARNING)
        for logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
            logging.getLogger(logger_name).setLevel(logging.NOTSET)
        for name in NOISY_HTTP_LOGGERS:
            logging.getLogger(name).setLevel(logging.NOTSET)
