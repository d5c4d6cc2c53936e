"""Tests for ImportConfig validation."""

import argparse
from pathlib import Path

import pytest

from dataexport.core.exceptions import ConfigError
from dataexport.core.import_config import DirectoryJob, ImportConfig, SingleFileJob


def make_args(**overrides):
    values = {
        "host": "localhost:8080",
        "email": "test@test.com",
        "password_file": "",
        "data_file": "item.json",
        "data_dir": "",
        "file_pattern": r"data_item_\d+\.json",
    }
    values.update(overrides)
    return argparse.Namespace(**values)


def test_single_file_job():
    config = ImportConfig.from_args(make_args())
    assert config.host == "localhost:8080"
    assert config.is_local
    assert config.password_file is None
    assert config.job == SingleFileJob(path=Path("item.json"))


def test_directory_job(tmp_path):
    config = ImportConfig.from_args(make_args(data_file="", data_dir=str(tmp_path)))
    assert isinstance(config.job, DirectoryJob)
    assert config.job.root == tmp_path
    assert config.job.pattern.fullmatch("data_item_12.json")


def test_directory_job_blank_pattern_uses_default(tmp_path):
    config = ImportConfig.from_args(
        make_args(data_file="", data_dir=str(tmp_path), file_pattern="")
    )
    assert config.job.pattern.pattern == r"data_item_\d+\.json"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"host": ""}, "-host"),
        ({"host": "   "}, "-host"),
        ({"email": ""}, "-email"),
        ({"host": "my-app.appspot.com"}, "-password_file"),
        ({"data_file": ""}, "-data_file or -data_dir"),
    ],
)
def test_missing_required_flags(overrides, message):
    with pytest.raises(ConfigError, match=message):
        ImportConfig.from_args(make_args(**overrides))


def test_remote_host_keeps_password_file():
    config = ImportConfig.from_args(
        make_args(host="my-app.appspot.com", password_file="~/.pw")
    )
    assert not config.is_local
    assert config.password_file == Path("~/.pw")


def test_local_host_drops_password_file():
    config = ImportConfig.from_args(make_args(password_file="/nonexistent/pw"))
    assert config.password_file is None


def test_file_and_dir_are_exclusive(tmp_path):
    with pytest.raises(ConfigError, match="mutually exclusive"):
        ImportConfig.from_args(make_args(data_dir=str(tmp_path)))


def test_data_dir_must_exist(tmp_path):
    with pytest.raises(ConfigError, match="not a directory"):
        ImportConfig.from_args(
            make_args(data_file="", data_dir=str(tmp_path / "missing"))
        )


def test_invalid_pattern(tmp_path):
    with pytest.raises(ConfigError, match="Invalid -file_pattern"):
        ImportConfig.from_args(
            make_args(data_file="", data_dir=str(tmp_path), file_pattern="data_(")
        )


def test_config_is_frozen():
    config = ImportConfig.from_args(make_args())
    with pytest.raises(AttributeError):
        config.host = "elsewhere"


@pytest.mark.parametrize("host", ["localhost:notaport", "my-app.appspot.com:443:extra"])
def test_invalid_host(host):
    with pytest.raises(ConfigError, match="Invalid -host"):
        ImportConfig.from_args(make_args(host=host, password_file="pw"))
