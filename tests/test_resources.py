from admx_catalog.collector import collect_sources
from admx_catalog.errors import DUPLICATE_IDENTIFIER, STRUCTURAL_AMBIGUITY, UNRESOLVED_REFERENCE
from admx_catalog.resources import find_language_dir, load_language

from conftest import ALT_ADMX, adml, write

ALT = "BaseALT.Policies.System"


def test_load_language(policy_tree, report):
    graph = collect_sources(policy_tree, report)
    resources = load_language(policy_tree, "en-US", graph, report)
    assert resources.strings["AutoUpdate"] == "Automatic updates"
    assert resources.strings["SUPPORTED_WindowsVista"] == "At least Windows Vista"

    proxy = resources.presentations[f"{ALT}::Proxy"]
    assert proxy["id"] == "Proxy"
    assert proxy["elements"] == [
        {"type": "dropdownList", "refId": "Mode", "label": "Mode", "default": 1},
        {"type": "decimalTextBox", "refId": "Port", "label": "Port:", "default": 3128},
        {"type": "textBox", "refId": "Server", "label": "Server", "default": "proxy.example.com"},
        {"type": "checkBox", "refId": "Bypass", "label": "Bypass local addresses", "default": True},
        {"type": "text", "label": "Applies to all users."},
    ]


def test_language_dir_case_insensitive(policy_tree):
    assert find_language_dir(policy_tree, "en-us") == policy_tree / "en-US"
    assert find_language_dir(policy_tree, "fr-FR") is None


def test_missing_language(policy_tree, report):
    graph = collect_sources(policy_tree, report)
    assert load_language(policy_tree, "fr-FR", graph, report) is None


def test_no_fallback_to_other_language(policy_tree, report):
    graph = collect_sources(policy_tree, report)
    resources = load_language(policy_tree, "de-DE", graph, report)
    assert "SUPPORTED_WindowsVista" not in resources.strings
    assert resources.presentations == {}


def test_duplicate_strings_overwrite(policy_tree, report):
    write(policy_tree / "en-US" / "zz_extra.adml", adml({"AutoUpdate": "Updated title"}))
    graph = collect_sources(policy_tree, report)
    resources = load_language(policy_tree, "en-US", graph, report)
    assert resources.strings["AutoUpdate"] == "Updated title"
    assert any("AutoUpdate" in i.message for i in report.of_kind(DUPLICATE_IDENTIFIER))


def test_presentations_without_source_file(policy_tree, report):
    write(policy_tree / "en-US" / "stray.adml",
          adml({"Stray": "Stray"}, '<presentation id="StrayPres"><text>x</text></presentation>'))
    graph = collect_sources(policy_tree, report)
    resources = load_language(policy_tree, "en-US", graph, report)
    assert resources.strings["Stray"] == "Stray"
    assert not any(k.endswith("::StrayPres") for k in resources.presentations)
    assert any("stray" in i.message for i in report.of_kind(UNRESOLVED_REFERENCE))


def test_resource_extension_case_insensitive(policy_tree, report):
    write(policy_tree / "en-US" / "extra.ADML", adml({"Extra": "Extra text"}))
    graph = collect_sources(policy_tree, report)
    resources = load_language(policy_tree, "en-US", graph, report)
    assert resources.strings["Extra"] == "Extra text"


def test_shared_stem_reported(policy_tree, report):
    second = ALT_ADMX.replace("BaseALT.Policies.System", "BaseALT.Policies.Second")
    write(policy_tree / "vendor" / "alt_system.admx", second)
    graph = collect_sources(policy_tree, report)
    resources = load_language(policy_tree, "en-US", graph, report)

    assert f"{ALT}::Proxy" in resources.presentations
    assert "BaseALT.Policies.Second::Proxy" not in resources.presentations
    ambiguous = [i for i in report.of_kind(STRUCTURAL_AMBIGUITY) if "share the stem" in i.message]
    assert len(ambiguous) == 1
    assert "vendor" in ambiguous[0].message
