"""Tests for AggregatorConfig."""

import dataclasses

import pytest

from aggregator.config import DEFAULT_EXECUTOR, DEFAULT_OWNER, AggregatorConfig
from tests.helpers import OWNER


class TestDefaults:
    def test_defaults(self):
        config = AggregatorConfig()

        assert config.fee_bps == 30
        assert config.deadline_seconds == 1200
        assert config.quote_connectors is False
        assert config.owner == DEFAULT_OWNER
        assert config.executor == DEFAULT_EXECUTOR
        assert config.rpc_url is None

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            AggregatorConfig().fee_bps = 5  # type: ignore[misc]

    def test_addresses_normalized(self):
        config = AggregatorConfig(owner=OWNER.upper().replace("0X", "0x"))
        assert config.owner == OWNER


class TestValidation:
    @pytest.mark.parametrize("fee_bps", [-1, 10_000])
    def test_fee_out_of_range(self, fee_bps):
        with pytest.raises(ValueError, match="fee_bps"):
            AggregatorConfig(fee_bps=fee_bps)

    def test_negative_deadline(self):
        with pytest.raises(ValueError, match="deadline_seconds"):
            AggregatorConfig(deadline_seconds=-1)

    def test_invalid_owner(self):
        with pytest.raises(ValueError):
            AggregatorConfig(owner="0x1234")


class TestFromEnv:
    """Tests for AggregatorConfig.from_env."""

    def test_empty_environment_gives_defaults(self):
        assert AggregatorConfig.from_env({}) == AggregatorConfig()

    def test_reads_prefixed_variables(self):
        config = AggregatorConfig.from_env(
            {
                "AGGREGATOR_FEE_BPS": "25",
                "AGGREGATOR_DEADLINE_SECONDS": "60",
                "AGGREGATOR_QUOTE_CONNECTORS": "true",
                "AGGREGATOR_OWNER": OWNER,
                "AGGREGATOR_RPC_URL": "http://127.0.0.1:8545",
                "AGGREGATOR_PORT": "9000",
                "AGGREGATOR_DEBUG": "1",
                "AGGREGATOR_LOG_LEVEL": "DEBUG",
            }
        )

        assert config.fee_bps == 25
        assert config.deadline_seconds == 60
        assert config.quote_connectors is True
        assert config.owner == OWNER
        assert config.rpc_url == "http://127.0.0.1:8545"
        assert config.port == 9000
        assert config.debug is True
        assert config.log_level == "DEBUG"

    def test_false_flag(self):
        config = AggregatorConfig.from_env({"AGGREGATOR_QUOTE_CONNECTORS": "no"})
        assert config.quote_connectors is False

    def test_empty_string_keeps_default(self):
        assert AggregatorConfig.from_env({"AGGREGATOR_RPC_URL": ""}).rpc_url is None

    def test_invalid_integer(self):
        with pytest.raises(ValueError, match="AGGREGATOR_FEE_BPS"):
            AggregatorConfig.from_env({"AGGREGATOR_FEE_BPS": "thirty"})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("AGGREGATOR_DEADLINE_SECONDS", "90")
        assert AggregatorConfig.from_env().deadline_seconds == 90
