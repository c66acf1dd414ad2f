import logging
import xml.etree.ElementTree as ET

from admx_catalog.namespaces import NamespaceMap, qualify, read_namespaces, resolve_name

PREFIXES = {"alt": "BaseALT.Policies.System", "windows": "Microsoft.Policies.Windows"}


class TestResolveName:
    def test_prefixed(self):
        assert resolve_name("windows:System", PREFIXES, "BaseALT.Policies.System") == \
            "Microsoft.Policies.Windows::System"

    def test_unprefixed_uses_default(self):
        assert resolve_name("Updates", PREFIXES, "BaseALT.Policies.System") == \
            "BaseALT.Policies.System::Updates"

    def test_unknown_prefix_returned_unchanged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="admx_catalog"):
            assert resolve_name("nope:System", PREFIXES, "X") == "nope:System"
        assert "Unknown namespace prefix 'nope'" in caplog.text

    def test_blank(self):
        assert resolve_name(None, PREFIXES, "X") is None
        assert resolve_name("  ", PREFIXES, "X") is None


def test_qualify():
    assert qualify("nsA", "System") == "nsA::System"


def test_read_namespaces():
    root = ET.fromstring(
        '<policyDefinitions xmlns="urn:test"><policyNamespaces>'
        '<target prefix="alt" namespace="BaseALT.Policies.System"/>'
        '<using prefix="windows" namespace="Microsoft.Policies.Windows"/>'
        '</policyNamespaces></policyDefinitions>'
    )
    ns_map = read_namespaces(root)
    assert ns_map.target == "BaseALT.Policies.System"
    assert ns_map.prefixes == PREFIXES
    assert ns_map.resolve("alt:Updates") == "BaseALT.Policies.System::Updates"


def test_read_namespaces_without_target():
    root = ET.fromstring(
        '<policyDefinitions><policyNamespaces>'
        '<using prefix="windows" namespace="Microsoft.Policies.Windows"/>'
        '</policyNamespaces></policyDefinitions>'
    )
    assert read_namespaces(root) is None


def test_namespace_map_resolve():
    ns_map = NamespaceMap(target="nsB", prefixes={"a": "nsA"})
    assert ns_map.resolve("a:X") == "nsA::X"
    assert ns_map.resolve("X") == "nsB::X"
