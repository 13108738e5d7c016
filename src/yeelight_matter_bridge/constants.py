"""Wire constants for Yeelight Matter lamps and the Color Control cluster."""

from __future__ import annotations

NETWORK_TYPE_MATTER = "MATTER"
NETWORK_TYPE_CHILD = "CHILD"

YEELIGHT_VENDOR_ID = 0x1312

PRIVATE_CLUSTER_ENDPOINT_ID = 0x02
PRIVATE_CLUSTER_ID = 0x1312FC05
PRIVATE_LIGHTING_EFFECT_ATTR_ID = 0x13120000
PRIVATE_LIGHTING_EFFECT_CMD_ID = 0x1312000E
EFFECT_FIELD_ID = 1

COLOR_CONTROL_CLUSTER_ID = 0x0300
CURRENT_HUE_ATTR_ID = 0x0000
CURRENT_SATURATION_ATTR_ID = 0x0001
COLOR_TEMPERATURE_MIREDS_ATTR_ID = 0x0007

# Capability identifiers on the hub side.
LIGHTING_EFFECT_CAPABILITY = "lightingEffect"
LIGHTING_EFFECT_ATTRIBUTE = "state"
STATE_CONTROL_COMMAND = "stateControl"
COLOR_CONTROL_CAPABILITY = "colorControl"
HUE_ATTRIBUTE = "hue"
SATURATION_ATTRIBUTE = "saturation"
COLOR_TEMPERATURE_CAPABILITY = "colorTemperature"
COLOR_TEMPERATURE_ATTRIBUTE = "colorTemperature"

CUSTOM_EFFECT = "custom"

# Device field keys.
CURRENT_LIGHTING_EFFECT_KEY = "effectID"
MOST_RECENT_TEMP_KEY = "mostRecentTemp"
