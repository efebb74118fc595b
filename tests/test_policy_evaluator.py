import pytest

from country_filter.evaluator import Mode, PolicyConfiguration, Verdict, evaluate


def _config(codes, mode):
    return PolicyConfiguration.build(codes, mode)


@pytest.mark.parametrize("mode", [Mode.ALLOW_LISTED, Mode.DENY_LISTED])
@pytest.mark.parametrize("code", ["US", "CN", "XX", "gb", ""])
def test_unavailable_resolver_always_allows(mode, code):
    assert evaluate(code, _config("CN US XX GB", mode), False) == Verdict.ALLOW
    assert evaluate(code, _config("", mode), False) == Verdict.ALLOW


def test_matching_is_case_insensitive():
    assert evaluate("gb", _config({"GB"}, Mode.DENY_LISTED), True) == Verdict.DENY
    assert evaluate("GB", _config("gb", Mode.DENY_LISTED), True) == Verdict.DENY
    assert evaluate("Gb", _config("gb", Mode.ALLOW_LISTED), True) == Verdict.ALLOW


def test_deny_listed():
    config = _config("CN RU", Mode.DENY_LISTED)
    assert evaluate("CN", config, True) == Verdict.DENY
    assert evaluate("RU", config, True) == Verdict.DENY
    assert evaluate("US", config, True) == Verdict.ALLOW


def test_allow_listed():
    config = _config(["GB"], Mode.ALLOW_LISTED)
    assert evaluate("GB", config, True) == Verdict.ALLOW
    assert evaluate("FR", config, True) == Verdict.DENY


def test_empty_code_set():
    for code in ("US", "CN", "XX"):
        assert evaluate(code, _config("", Mode.DENY_LISTED), True) == Verdict.ALLOW
        assert evaluate(code, _config("", Mode.ALLOW_LISTED), True) == Verdict.DENY


def test_unknown_code_matches_like_any_other():
    assert evaluate("XX", _config("XX", Mode.DENY_LISTED), True) == Verdict.DENY
    assert evaluate("XX", _config("CN", Mode.DENY_LISTED), True) == Verdict.ALLOW
    assert evaluate("XX", _config("GB XX", Mode.ALLOW_LISTED), True) == Verdict.ALLOW


def test_no_substring_matching():
    config = _config("CNX", Mode.DENY_LISTED)
    assert evaluate("CN", config, True) == Verdict.ALLOW
    assert evaluate("N", _config("CN", Mode.DENY_LISTED), True) == Verdict.ALLOW


def test_evaluate_is_deterministic():
    config = _config("CN", Mode.DENY_LISTED)
    results = {evaluate("CN", config, True) for _ in range(10)}
    assert results == {Verdict.DENY}


def test_configuration_is_immutable():
    config = _config("cn ru", Mode.DENY_LISTED)
    assert config.country_codes == frozenset({"CN", "RU"})
    with pytest.raises(AttributeError):
        config.mode = Mode.ALLOW_LISTED


def test_default_configuration_allows_everything():
    config = PolicyConfiguration()
    assert config.mode == Mode.DENY_LISTED
    assert config.country_codes == frozenset()
    assert evaluate("CN", config, True) == Verdict.ALLOW
