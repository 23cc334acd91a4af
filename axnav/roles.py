"""Known accessibility element types.

Search type names ("button", "application_dock_items") resolve against this
universe.  Order matters: it is the tie-break order for equally short
matches, so roles come before subroles.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# AXRole values
# ---------------------------------------------------------------------------

AX_ROLES: tuple[str, ...] = (
    "AXApplication",
    "AXSystemWide",
    "AXWindow",
    "AXSheet",
    "AXDrawer",
    "AXGrowArea",
    "AXImage",
    "AXUnknown",
    "AXButton",
    "AXRadioButton",
    "AXCheckBox",
    "AXPopUpButton",
    "AXMenuButton",
    "AXTabGroup",
    "AXTable",
    "AXColumn",
    "AXRow",
    "AXCell",
    "AXOutline",
    "AXBrowser",
    "AXScrollArea",
    "AXScrollBar",
    "AXRadioGroup",
    "AXList",
    "AXGroup",
    "AXValueIndicator",
    "AXComboBox",
    "AXSlider",
    "AXIncrementor",
    "AXBusyIndicator",
    "AXProgressIndicator",
    "AXRelevanceIndicator",
    "AXLevelIndicator",
    "AXToolbar",
    "AXDisclosureTriangle",
    "AXTextField",
    "AXTextArea",
    "AXStaticText",
    "AXHeading",
    "AXMenuBar",
    "AXMenuBarItem",
    "AXMenu",
    "AXMenuItem",
    "AXSplitGroup",
    "AXSplitter",
    "AXColorWell",
    "AXTimeField",
    "AXDateField",
    "AXHelpTag",
    "AXMatte",
    "AXDockItem",
    "AXRuler",
    "AXRulerMarker",
    "AXGrid",
    "AXLevelIndicator",
    "AXHandle",
    "AXPopover",
    "AXLayoutArea",
    "AXLayoutItem",
    "AXLink",
    "AXListMarker",
    "AXWebArea",
)

# ---------------------------------------------------------------------------
# AXSubrole values
# ---------------------------------------------------------------------------

AX_SUBROLES: tuple[str, ...] = (
    "AXStandardWindow",
    "AXDialog",
    "AXSystemDialog",
    "AXFloatingWindow",
    "AXSystemFloatingWindow",
    "AXCloseButton",
    "AXMinimizeButton",
    "AXZoomButton",
    "AXFullScreenButton",
    "AXToolbarButton",
    "AXSortButton",
    "AXSecureTextField",
    "AXSearchField",
    "AXTableRow",
    "AXOutlineRow",
    "AXIncrementArrow",
    "AXDecrementArrow",
    "AXIncrementPage",
    "AXDecrementPage",
    "AXContentList",
    "AXDefinitionList",
    "AXDescriptionList",
    "AXTabButton",
    "AXMenuItemCheckbox",
    "AXMenuItemRadio",
    "AXToggle",
    "AXSwitch",
    "AXRatingIndicator",
    "AXTimeline",
    "AXTextAttachment",
    "AXTextLink",
    "AXApplicationDockItem",
    "AXDocumentDockItem",
    "AXFolderDockItem",
    "AXMinimizedWindowDockItem",
    "AXURLDockItem",
    "AXDockExtraDockItem",
    "AXTrashDockItem",
    "AXSeparatorDockItem",
    "AXProcessSwitcherList",
    "AXApplicationAlert",
    "AXApplicationDialog",
    "AXApplicationStatus",
    "AXLandmarkNavigation",
    "AXLandmarkSearch",
    "AXLandmarkRegion",
    "AXLandmarkMain",
    "AXLandmarkBanner",
    "AXDocument",
    "AXWebApplication",
    "AXUnknown",
)


def _dedupe(names: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(names))


KNOWN_TYPES: tuple[str, ...] = _dedupe(AX_ROLES + AX_SUBROLES)
