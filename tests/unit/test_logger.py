import pytest

from app.logging.logger import Log


class TestLog:
    def test_renders_fields_after_message(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("INFO", logger="framepack"):
            Log.info("Archive persisted", key="frames_1.zip", location="outputs")

        assert caplog.records[-1].getMessage() == (
            "Archive persisted [key=frames_1.zip location=outputs]"
        )

    def test_plain_message_without_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="framepack"):
            Log.warning("Failed to remove temp directory")

        assert caplog.records[-1].getMessage() == "Failed to remove temp directory"
        assert caplog.records[-1].levelname == "WARNING"

    def test_debug_is_filtered_at_info(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("INFO", logger="framepack"):
            Log.debug("noisy")

        assert caplog.records == []
