import pytest

from untis_subst.core.classes import (ClassResolver, ClassRoster, expand_grade, expand_grade_range,
                                      get_class_name, is_valid_class, match_concatenated, split_separated)
from untis_subst.core.errors import RosterUnavailable


# --- Roster ---

def test_roster_caches_accessor_result(mocker, roster):
    accessor = mocker.Mock(return_value=roster)
    class_roster = ClassRoster(accessor, ttl=60)
    assert class_roster.get() == roster
    assert class_roster.get() == roster
    accessor.assert_called_once()


def test_roster_io_failure_is_reported_and_not_cached(mocker, roster):
    accessor = mocker.Mock(side_effect=[OSError("timeout"), roster])
    class_roster = ClassRoster(accessor)
    with pytest.raises(RosterUnavailable, match="timeout"):
        class_roster.get()
    assert class_roster.get() == roster


def test_static_roster():
    assert ClassRoster.static(["5a"]).get() == ["5a"]
    assert ClassRoster.static(None).get() is None


# --- Class Names ---

@pytest.mark.parametrize("text, regex, expected", [
    ("(5a)", None, "5a"),
    ("Klasse 5a", r"Klasse (\w+)", "5a"),
    ("5a", r"\d+", "5"),
    ("Lehrer", r"\d+\w", ""),
])
def test_get_class_name(text, regex, expected):
    assert get_class_name(text, regex) == expected


def test_is_valid_class():
    assert is_valid_class("5a", {"-----"})
    assert not is_valid_class("-----", {"-----"})
    assert not is_valid_class("", set())
    assert not is_valid_class(None, set())


# --- Expansion Strategies ---

def test_expand_grade_range(roster):
    assert expand_grade_range(5, 6, roster) == ["5a", "5b", "6a", "6b"]


def test_expand_grade(roster):
    assert expand_grade(5, roster) == ["5a", "5b"]
    assert expand_grade(10, roster) == ["10b"]
    assert expand_grade(1, roster) == []


def test_split_separated():
    assert split_separated("5a, 6b") == ["5a", "6b"]


def test_match_concatenated(roster):
    assert match_concatenated("5ab", roster) == ["5a", "5b"]
    assert match_concatenated("6b", roster) == ["6b"]


def test_match_concatenated_escapes_metacharacters():
    assert match_concatenated("Q1x2", ["Q1.2", "Q1x2"]) == ["Q1x2"]


# --- Resolver ---

@pytest.mark.parametrize("text, expected", [
    ("5-6", {"5a", "5b", "6a", "6b"}),
    ("5 - 6", {"5a", "5b", "6a", "6b"}),
    ("5", {"5a", "5b"}),
    ("5a, 6b", {"5a", "6b"}),
    ("7a", {"7a"}),
    ("", set()),
    (None, set()),
])
def test_resolver_separated(roster, text, expected):
    resolver = ClassResolver(roster=ClassRoster.static(roster))
    assert resolver.resolve(text) == expected


def test_resolver_concatenated(roster):
    resolver = ClassResolver(roster=ClassRoster.static(roster), classes_separated=False)
    assert resolver.resolve("5ab") == {"5a", "5b"}
    assert resolver.resolve("5-6") == {"5a", "5b", "6a", "6b"}


def test_resolver_concatenated_disabled(roster):
    resolver = ClassResolver(roster=ClassRoster.static(roster), classes_separated=False, fuzzy_strategy=None)
    assert resolver.resolve("5ab") == set()


def test_resolver_never_returns_excluded_classes(roster):
    resolver = ClassResolver(roster=ClassRoster.static(roster), excluded={"-----", "5b"})
    assert resolver.resolve("-----") == set()
    assert resolver.resolve("5") == {"5a"}
    assert resolver.resolve("5a, 5b") == {"5a"}


def test_resolver_without_roster_yields_no_grade_classes():
    resolver = ClassResolver(roster=None)
    assert resolver.resolve("5") == set()
    assert resolver.resolve("5a, 5b") == {"5a", "5b"}


def test_resolver_roster_unavailable(mocker):
    roster = ClassRoster(mocker.Mock(side_effect=OSError("down")))
    assert ClassResolver(roster=roster).resolve("5-6") == set()

    strict = ClassResolver(roster=roster, roster_required=True)
    with pytest.raises(RosterUnavailable):
        strict.resolve("5-6")


def test_resolver_examples():
    resolver = ClassResolver(roster=ClassRoster.static(["5a", "5b", "6a", "7c"]))
    assert resolver.resolve("5-6") == {"5a", "5b", "6a"}
    assert resolver.resolve("5") == {"5a", "5b"}
    assert ClassResolver(roster=None).resolve("5a, 7c") == {"5a", "7c"}
