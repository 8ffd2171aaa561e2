import pytest

from depchain.domain.allow_set import build_allow_set, declared_names, is_allowed
from depchain.domain.package import DependencyDeclaration, DependencyKind


def _dep(name, kind=DependencyKind.NORMAL):
    return DependencyDeclaration(name=name, kind=kind, version_range="^1.0.0")


def test_own_package_name_always_passes():
    allow_set = build_allow_set([])
    assert is_allowed("foo", allow_set, "foo")


def test_declared_dependency_passes():
    allow_set = build_allow_set([_dep("bar"), _dep("jest", DependencyKind.DEV)])
    assert is_allowed("foo", allow_set, "bar")
    assert is_allowed("foo", allow_set, "jest")
    assert not is_allowed("foo", allow_set, "baz")


def test_ignored_name_passes_but_is_not_declared():
    allow_set = build_allow_set([_dep("bar")], ignored_imports=["expo-modules-core"])
    assert is_allowed("foo", allow_set, "expo-modules-core")
    assert allow_set["expo-modules-core"] is None
    assert declared_names(allow_set) == {"bar"}


def test_declaration_wins_over_ignore_entry():
    declaration = _dep("expo-modules-core", DependencyKind.PEER)
    allow_set = build_allow_set([declaration], ignored_imports=["expo-modules-core"])
    assert allow_set["expo-modules-core"] == declaration
    assert declared_names(allow_set) == {"expo-modules-core"}


def test_allow_set_is_read_only():
    allow_set = build_allow_set([_dep("bar")])
    with pytest.raises(TypeError):
        allow_set["baz"] = None  # type: ignore[index]
