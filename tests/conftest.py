"""
Fixtures for admx_catalog tests.

policy_tree writes a small PolicyDefinitions directory:

    windows.admx      Microsoft.Policies.Windows: System, WindowsComponents
    alt_system.admx   BaseALT.Policies.System: System, Updates, Orphan + policies
    en-US/*.adml, de-DE/alt_system.adml
"""
import textwrap

import pytest

from admx_catalog.errors import RunReport

ADMX_NS = "http://schemas.microsoft.com/GroupPolicy/2006/07/PolicyDefinitions"

WINDOWS_ADMX = f"""\
<?xml version="1.0" encoding="utf-8"?>
<policyDefinitions xmlns="{ADMX_NS}" revision="1.0" schemaVersion="1.0">
  <policyNamespaces>
    <target prefix="windows" namespace="Microsoft.Policies.Windows"/>
  </policyNamespaces>
  <resources minRequiredRevision="1.0"/>
  <supportedOn>
    <definitions>
      <definition name="SUPPORTED_WindowsVista" displayName="$(string.SUPPORTED_WindowsVista)"/>
    </definitions>
  </supportedOn>
  <categories>
    <category name="System" displayName="$(string.System)"/>
    <category name="WindowsComponents" displayName="$(string.WindowsComponents)"/>
  </categories>
</policyDefinitions>
"""

ALT_ADMX = f"""\
<?xml version="1.0" encoding="utf-8"?>
<policyDefinitions xmlns="{ADMX_NS}" revision="1.0" schemaVersion="1.0">
  <policyNamespaces>
    <target prefix="alt" namespace="BaseALT.Policies.System"/>
    <using prefix="windows" namespace="Microsoft.Policies.Windows"/>
  </policyNamespaces>
  <resources minRequiredRevision="1.0"/>
  <categories>
    <category name="System" displayName="$(string.ALT_System)"/>
    <category name="Updates" displayName="$(string.Updates)">
      <parentCategory ref="windows:WindowsComponents"/>
    </category>
    <category name="Orphan">
      <parentCategory ref="alt:Missing"/>
    </category>
  </categories>
  <policies>
    <policy name="AutoUpdate" class="Machine" displayName="$(string.AutoUpdate)"
            explainText="$(string.AutoUpdate_Help)" key="Software\\BaseALT\\Policies\\Updates"
            valueName="Foo">
      <parentCategory ref="Updates"/>
      <supportedOn ref="windows:SUPPORTED_WindowsVista"/>
      <enabledValue><decimal value="1"/></enabledValue>
      <disabledValue><decimal value="0"/></disabledValue>
    </policy>
    <policy name="Lost" class="User" displayName="$(string.Lost)"
            key="Software/BaseALT/Policies/Lost" valueName="Lost">
      <parentCategory ref="Nowhere"/>
      <enabledValue><decimal value="1"/></enabledValue>
    </policy>
    <policy name="Proxy" class="Both" displayName="$(string.Proxy)"
            presentation="$(presentation.Proxy)" key="Software\\BaseALT\\Policies\\Proxy"
            valueName="ProxyEnabled">
      <parentCategory ref="alt:System"/>
      <supportedOn ref="SUPPORTED_Unknown"/>
      <enabledValue><decimal value="1"/></enabledValue>
      <disabledValue><decimal value="0"/></disabledValue>
      <elements>
        <enum id="Mode" valueName="Mode" required="true">
          <item displayName="$(string.Mode_Auto)"><value><decimal value="0"/></value></item>
          <item displayName="$(string.Mode_Manual)"><value><decimal value="1"/></value></item>
        </enum>
        <decimal id="Port" valueName="Port" minValue="1" maxValue="65535"/>
        <text id="Server" valueName="Server" maxLength="255"/>
        <boolean id="Bypass" valueName="Bypass">
          <trueValue><decimal value="1"/></trueValue>
          <falseValue><decimal value="0"/></falseValue>
        </boolean>
        <multiText id="Exceptions" valueName="Exceptions"/>
        <bogus id="Weird" valueName="Weird"/>
      </elements>
    </policy>
    <policy name="Windowed" class="Machine" displayName="$(string.Windowed)"
            key="Software\\BaseALT\\Policies\\Windowed" valueName="Windowed">
      <parentCategory ref="windows:System"/>
      <enabledValue><decimal value="1"/></enabledValue>
      <disabledValue><decimal value="0"/></disabledValue>
    </policy>
  </policies>
</policyDefinitions>
"""

NO_TARGET_ADMX = f"""\
<?xml version="1.0" encoding="utf-8"?>
<policyDefinitions xmlns="{ADMX_NS}">
  <categories><category name="Ghost"/></categories>
</policyDefinitions>
"""

ADML_NS = "http://schemas.microsoft.com/GroupPolicy/2006/07/PolicyDefinitions"


def adml(strings: dict, presentations: str = "") -> str:
    rows = "\n".join(f'      <string id="{k}">{v}</string>' for k, v in strings.items())
    return f"""\
<?xml version="1.0" encoding="utf-8"?>
<policyDefinitionResources xmlns="{ADML_NS}" revision="1.0" schemaVersion="1.0">
  <displayName/>
  <description/>
  <resources>
    <stringTable>
{rows}
    </stringTable>
    <presentationTable>
{presentations}
    </presentationTable>
  </resources>
</policyDefinitionResources>
"""


PROXY_PRESENTATION = """\
      <presentation id="Proxy">
        <dropdownList refId="Mode" defaultItem="1">$(string.Mode_Label)</dropdownList>
        <decimalTextBox refId="Port" defaultValue="3128">Port:</decimalTextBox>
        <textBox refId="Server">
          <label>$(string.Server_Label)</label>
          <defaultValue>proxy.example.com</defaultValue>
        </textBox>
        <checkBox refId="Bypass" defaultChecked="true">$(string.Bypass_Label)</checkBox>
        <text>$(string.Proxy_Note)</text>
      </presentation>
"""

EN_WINDOWS = {
    "System": "System",
    "WindowsComponents": "Windows Components",
    "SUPPORTED_WindowsVista": "At least Windows Vista",
}

EN_ALT = {
    "ALT_System": "ALT System",
    "Updates": "Updates",
    "AutoUpdate": "Automatic updates",
    "AutoUpdate_Help": "Controls automatic updates.",
    "Proxy": "Proxy settings",
    "Mode_Auto": "Automatic",
    "Mode_Manual": "Manual",
    "Mode_Label": "Mode",
    "Server_Label": "Server",
    "Bypass_Label": "Bypass local addresses",
    "Proxy_Note": "Applies to all users.",
    "Windowed": "Windowed mode",
}

DE_ALT = {
    "ALT_System": "ALT-System",
    "Updates": "Aktualisierungen",
    "AutoUpdate": "Automatische Updates",
    "Enabled": "Aktiviert",
    "Disabled": "Deaktiviert",
}


def write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture
def report():
    return RunReport()


@pytest.fixture
def policy_tree(tmp_path):
    root = tmp_path / "PolicyDefinitions"
    write(root / "windows.admx", WINDOWS_ADMX)
    write(root / "alt_system.admx", ALT_ADMX)
    write(root / "en-US" / "windows.adml", adml(EN_WINDOWS))
    write(root / "en-US" / "alt_system.adml", adml(EN_ALT, PROXY_PRESENTATION))
    write(root / "de-DE" / "alt_system.adml", adml(DE_ALT))
    return root
