import pytest

from gmreval import Config, criterion_defaults, CriterionKind, DEFAULT_LMBDA, InvalidArgumentError


def _write_cfg(tmp_path, text):
    fname = tmp_path / "criteria.cfg"
    fname.write_text(text)
    return str(fname)


def test_config_parses_file(tmp_path):
    fname = _write_cfg(tmp_path, "# information criterion settings\nlmbda = 0.5 # scaling\n\nkind=mse\n")
    config = Config(fname)

    assert config.getArg("lmbda") == "0.5"
    assert config.getArg("kind") == "mse"
    assert config.hasArg("kind")
    assert not config.hasArg("K")
    config.setArg("K", "3")
    assert config.getArg("K") == "3"


def test_criterion_defaults_from_file(tmp_path):
    fname = _write_cfg(tmp_path, "lmbda = 0.5\nkind = mse\n")

    assert criterion_defaults(fname) == {"lmbda": 0.5, "kind": CriterionKind.MSE}


def test_criterion_defaults_fall_back():
    assert criterion_defaults(Config()) == {"lmbda": DEFAULT_LMBDA, "kind": CriterionKind.LIKELIHOOD}


@pytest.mark.parametrize("name, value", [("lmbda", "abc"), ("kind", "loss")])
def test_criterion_defaults_reject_bad_values(name, value):
    config = Config()
    config.setArg(name, value)
    with pytest.raises(InvalidArgumentError):
        criterion_defaults(config)
