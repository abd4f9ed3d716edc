from loguru import logger

from logger import setup_logger


def test_setup_logger_writes_to_file(tmp_path):
    log_file = tmp_path / "logs" / "service.log"
    setup_logger(level="DEBUG", log_file=str(log_file))
    logger.debug("debug line for file sink")
    logger.complete()

    assert "debug line for file sink" in log_file.read_text(encoding="utf-8")
    setup_logger(level="INFO")
