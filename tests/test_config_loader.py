import pytest

from task_orchestrator.config import OrchestratorConfig, load_config
from task_orchestrator.errors import ConfigError


def test_defaults_without_file_or_env():
    cfg = load_config(environ={})
    assert cfg == OrchestratorConfig()
    assert cfg.streaming_threshold == 1000
    assert cfg.queue_capacity == 1000
    assert cfg.request_timeout == 10.0
    assert cfg.delay_seconds == 5.0


def test_load_config_file(tmp_path):
    yaml_text = """
streaming_threshold: 10
queue_capacity: 5
fetch_url: http://localhost:8080/health
delay_seconds: 0.5
"""
    cfg_path = tmp_path / "orchestrator.yaml"
    cfg_path.write_text(yaml_text)
    cfg = load_config(cfg_path, environ={})
    assert cfg.streaming_threshold == 10
    assert cfg.queue_capacity == 5
    assert cfg.fetch_url == "http://localhost:8080/health"
    assert cfg.delay_seconds == 0.5
    assert cfg.log_level == "INFO"


def test_env_overrides_file(tmp_path):
    cfg_path = tmp_path / "orchestrator.yaml"
    cfg_path.write_text("streaming_threshold: 10\nlog_level: DEBUG\n")
    environ = {
        "TASK_ORCHESTRATOR_CONFIG": str(cfg_path),
        "TASK_ORCHESTRATOR_STREAMING_THRESHOLD": "25",
        "TASK_ORCHESTRATOR_REQUEST_TIMEOUT": "2.5",
    }
    cfg = load_config(environ=environ)
    assert cfg.streaming_threshold == 25
    assert cfg.request_timeout == 2.5
    assert cfg.log_level == "DEBUG"


def test_log_file_from_env():
    cfg = load_config(environ={"TASK_ORCHESTRATOR_LOG_FILE": "logs/run.log"})
    assert cfg.log_file == "logs/run.log"


def test_empty_file_uses_defaults(tmp_path):
    cfg_path = tmp_path / "empty.yaml"
    cfg_path.write_text("")
    assert load_config(cfg_path, environ={}) == OrchestratorConfig()


def test_unknown_key_rejected(tmp_path):
    cfg_path = tmp_path / "orchestrator.yaml"
    cfg_path.write_text("retries: 3\n")
    with pytest.raises(ConfigError, match="retries"):
        load_config(cfg_path, environ={})


def test_non_mapping_file_rejected(tmp_path):
    cfg_path = tmp_path / "orchestrator.yaml"
    cfg_path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(cfg_path, environ={})


def test_missing_file_rejected(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read"):
        load_config(tmp_path / "nope.yaml", environ={})


def test_invalid_number_rejected():
    with pytest.raises(ConfigError, match="queue_capacity"):
        load_config(environ={"TASK_ORCHESTRATOR_QUEUE_CAPACITY": "lots"})


@pytest.mark.parametrize(
    "key,value",
    [
        ("TASK_ORCHESTRATOR_QUEUE_CAPACITY", "0"),
        ("TASK_ORCHESTRATOR_STREAMING_THRESHOLD", "-1"),
        ("TASK_ORCHESTRATOR_MAX_WORKERS", "0"),
        ("TASK_ORCHESTRATOR_REQUEST_TIMEOUT", "0"),
    ],
)
def test_out_of_range_rejected(key, value):
    with pytest.raises(ConfigError):
        load_config(environ={key: value})


def test_fractional_int_in_file_rejected(tmp_path):
    cfg_path = tmp_path / "orchestrator.yaml"
    cfg_path.write_text("queue_capacity: 2.7\n")
    with pytest.raises(ConfigError, match="queue_capacity"):
        load_config(cfg_path, environ={})


def test_fractional_int_in_env_rejected():
    with pytest.raises(ConfigError, match="queue_capacity"):
        load_config(environ={"TASK_ORCHESTRATOR_QUEUE_CAPACITY": "2.7"})


def test_whole_float_accepted_for_int_field(tmp_path):
    cfg_path = tmp_path / "orchestrator.yaml"
    cfg_path.write_text("queue_capacity: 4.0\n")
    assert load_config(cfg_path, environ={}).queue_capacity == 4
