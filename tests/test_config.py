from mcp_dice_notation.config import Settings


def test_defaults(monkeypatch):
    for name in ("DICE_LOG_LEVEL", "DICE_SEED", "DICE_MAX_DICE", "DICE_MAX_EXPRESSIONS", "DICE_MAX_TERMS"):
        monkeypatch.delenv(name, raising=False)

    cfg = Settings(_env_file=None)

    assert cfg.log_level == "INFO"
    assert cfg.seed is None
    assert cfg.max_dice == 1000
    assert cfg.max_expressions == 100
    assert cfg.max_terms == 100


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("DICE_SEED", "99")
    monkeypatch.setenv("DICE_MAX_DICE", "50")
    monkeypatch.setenv("DICE_LOG_LEVEL", "debug")

    cfg = Settings(_env_file=None)

    assert cfg.seed == 99
    assert cfg.max_dice == 50
    assert cfg.log_level == "debug"
