"""
Tests for environment-based configuration.
"""

import pytest

from ec2_worker.config.provider import DEFAULT_REGION, EnvConfigProvider

ENV_VARS = [
    "SQS_QUEUE_URL",
    "AWS_REGION",
    "RESPONSE_QUEUE_NAME",
    "POLL_INTERVAL_SECONDS",
    "WAIT_TIME_SECONDS",
    "VISIBILITY_TIMEOUT",
    "PARSE_FAILURE_MAX_RECEIVES",
    "ALLOWED_COMMANDS",
    "ALLOWLIST_CONFIG",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SQS_QUEUE_URL", "https://sqs.us-east-1.amazonaws.com/123456789012/jobs")
    return monkeypatch


def test_defaults(clean_env):
    config = EnvConfigProvider().get_worker_config()

    assert config.queue_url == "https://sqs.us-east-1.amazonaws.com/123456789012/jobs"
    assert config.region == DEFAULT_REGION == "us-east-1"
    assert config.response_queue_name is None
    assert config.poll_interval == 5.0
    assert config.wait_time_seconds == 20
    assert config.visibility_timeout == 30
    assert config.parse_failure_max_receives == 1
    assert config.allowed_commands is None
    assert config.allowlist_config is None
    assert config.log_level == "INFO"


def test_overrides(clean_env):
    clean_env.setenv("AWS_REGION", "eu-central-1")
    clean_env.setenv("RESPONSE_QUEUE_NAME", "results")
    clean_env.setenv("POLL_INTERVAL_SECONDS", "0.5")
    clean_env.setenv("WAIT_TIME_SECONDS", "10")
    clean_env.setenv("VISIBILITY_TIMEOUT", "600")
    clean_env.setenv("PARSE_FAILURE_MAX_RECEIVES", "0")
    clean_env.setenv("ALLOWED_COMMANDS", "ls,git")
    clean_env.setenv("ALLOWLIST_CONFIG", "/etc/ec2-worker/allowlist.yaml")
    clean_env.setenv("LOG_LEVEL", "debug")

    config = EnvConfigProvider().get_worker_config()

    assert config.region == "eu-central-1"
    assert config.response_queue_name == "results"
    assert config.poll_interval == 0.5
    assert config.wait_time_seconds == 10
    assert config.visibility_timeout == 600
    assert config.parse_failure_max_receives == 0
    assert config.allowed_commands == "ls,git"
    assert config.allowlist_config == "/etc/ec2-worker/allowlist.yaml"
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_queue_url_required(clean_env, value):
    if value is None:
        clean_env.delenv("SQS_QUEUE_URL")
    else:
        clean_env.setenv("SQS_QUEUE_URL", value)

    with pytest.raises(ValueError, match="SQS_QUEUE_URL"):
        EnvConfigProvider().get_worker_config()


@pytest.mark.parametrize(
    "name,value",
    [
        ("WAIT_TIME_SECONDS", "21"),
        ("WAIT_TIME_SECONDS", "-1"),
        ("WAIT_TIME_SECONDS", "soon"),
        ("VISIBILITY_TIMEOUT", "43201"),
        ("PARSE_FAILURE_MAX_RECEIVES", "-3"),
        ("POLL_INTERVAL_SECONDS", "-1"),
        ("POLL_INTERVAL_SECONDS", "fast"),
    ],
)
def test_invalid_numbers(clean_env, name, value):
    clean_env.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        EnvConfigProvider().get_worker_config()


def test_blank_numbers_use_defaults(clean_env):
    clean_env.setenv("WAIT_TIME_SECONDS", "")

    assert EnvConfigProvider().get_worker_config().wait_time_seconds == 20
