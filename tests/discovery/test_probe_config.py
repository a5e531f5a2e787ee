import pytest
from pydantic import ValidationError

from ngrok_probe.discovery import DEFAULT_INSPECTION_PORT, ProbeConfig


class TestProbeConfig:
    def test_probe_config_defaults(self):
        """ProbeConfig defaults match the tunneling agent's usual startup"""
        config = ProbeConfig()

        assert config.candidate_hosts == ("localhost",)
        assert config.port == DEFAULT_INSPECTION_PORT == 4040
        assert config.poll_interval == 1.0
        assert config.initial_delay == 5.0
        assert config.poll_timeout == 60.0
        assert config.deadline is None
        assert config.request_timeout == 10.0

    def test_inspection_urls_follow_host_priority(self):
        """One inspection URL per candidate host, in order"""
        config = ProbeConfig(candidate_hosts=["host.docker.internal", " localhost ", "::1"], port=4041)

        assert config.candidate_hosts == ("host.docker.internal", "localhost", "::1")
        assert config.inspection_urls() == [
            "http://host.docker.internal:4041/api/tunnels",
            "http://localhost:4041/api/tunnels",
            "http://[::1]:4041/api/tunnels",
        ]

    def test_probe_config_validation_errors(self):
        """Invalid values are rejected at construction"""
        with pytest.raises(ValidationError, match="less than or equal to 65535"):
            ProbeConfig(port=70000)

        with pytest.raises(ValidationError, match="greater than or equal to 0"):
            ProbeConfig(poll_interval=-1.0)

        with pytest.raises(ValidationError, match="greater than 0"):
            ProbeConfig(request_timeout=0.0)

        with pytest.raises(ValidationError, match="greater than 0"):
            ProbeConfig(poll_timeout=0.0)

        with pytest.raises(ValidationError, match="at least 1 item"):
            ProbeConfig(candidate_hosts=())

        with pytest.raises(ValidationError, match="Candidate host cannot be empty"):
            ProbeConfig(candidate_hosts=("localhost", ""))

    def test_probe_config_rejects_unknown_fields(self):
        """Typos in option names are errors"""
        with pytest.raises(ValidationError):
            ProbeConfig(poll_intervall=2.0)

    def test_probe_config_is_frozen(self):
        """A run's configuration cannot change under it"""
        config = ProbeConfig()

        with pytest.raises(ValidationError):
            config.port = 4041

    def test_with_overrides(self):
        """with_overrides returns a validated copy"""
        config = ProbeConfig(candidate_hosts=("a", "b"))

        updated = config.with_overrides(port=4041, initial_delay=0.0)

        assert updated.port == 4041
        assert updated.initial_delay == 0.0
        assert updated.candidate_hosts == ("a", "b")
        assert config.port == 4040

        with pytest.raises(ValidationError):
            config.with_overrides(port=0)
