import logging

from quasar_sim.core.config import AppConfig


def test_round_trip(tmp_path):
    config = AppConfig(_config_dir=tmp_path)
    config.default_shots = 256
    config.seed = 99
    config.add_recent_file("/tmp/a.qsim")
    config.save()

    loaded = AppConfig.load(tmp_path)
    assert loaded.default_shots == 256
    assert loaded.seed == 99
    assert loaded.recent_files == ["/tmp/a.qsim"]


def test_missing_file_gives_defaults(tmp_path):
    config = AppConfig.load(tmp_path / "nowhere")
    assert config.default_shots == 1000
    assert config.seed is None


def test_corrupt_file_is_ignored(tmp_path, caplog):
    (tmp_path / "config.json").write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        config = AppConfig.load(tmp_path)
    assert config.default_shots == 1000
    assert "Ignoring unreadable config" in caplog.text


def test_recent_files_are_deduplicated_and_capped(tmp_path):
    config = AppConfig(_config_dir=tmp_path)
    for i in range(12):
        config.add_recent_file(f"f{i}")
    config.add_recent_file("f5")
    assert config.recent_files[0] == "f5"
    assert config.recent_files.count("f5") == 1
    assert len(config.recent_files) == 10
