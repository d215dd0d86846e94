from __future__ import annotations

from texcheck.core.exclusion import ExclusionRules, is_excluded


def test_keyword_matches_whole_segment_only():
    rules = ExclusionRules.build(keywords=["Editor"])
    assert is_excluded("Assets/Editor/Foo.png", rules)
    assert not is_excluded("Assets/EditorTools/Foo.png", rules)


def test_keyword_ignores_case_and_separator_style():
    rules = ExclusionRules.build(keywords=["editor"])
    assert is_excluded("Assets\\EDITOR\\Foo.png", rules)
    assert is_excluded("Assets//Editor//Foo.png", rules)


def test_prefix_ignores_case():
    rules = ExclusionRules.build(prefixes=["Assets/Plugins/"])
    assert is_excluded("assets/plugins/Vendor/icon.png", rules)
    assert not is_excluded("Assets/Textures/Plugins/icon.png", rules)


def test_either_rule_excludes():
    rules = ExclusionRules.build(prefixes=["Packages/"], keywords=["Gizmos"])
    assert is_excluded("Packages/com.x/tex.png", rules)
    assert is_excluded("Assets/Gizmos/tex.png", rules)
    assert not is_excluded("Assets/Textures/tex.png", rules)


def test_empty_rules_exclude_nothing():
    assert not is_excluded("Assets/Editor/Foo.png", ExclusionRules())
    assert not is_excluded("", ExclusionRules.build(keywords=["Editor"]))
