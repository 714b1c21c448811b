"""
USB Video Class constants (UVC 1.1 / 1.5)
"""

# Interface class / subclass of the Video Control interface
USB_CLASS_VIDEO = 0x0E
SC_VIDEOCONTROL = 0x01

# Class-specific descriptor type and Video Control subtypes
CS_INTERFACE = 0x24
VC_INPUT_TERMINAL = 0x02
VC_PROCESSING_UNIT = 0x05

# Input terminal type of a camera sensor
ITT_CAMERA = 0x0201

# UVC request codes
SET_CUR = 0x01
GET_CUR = 0x81
GET_MIN = 0x82
GET_MAX = 0x83
GET_RES = 0x84
GET_LEN = 0x85
GET_INFO = 0x86
GET_DEF = 0x87

# bmRequestType
REQ_TYPE_GET = 0xA1  # Class, Interface, Device-to-Host
REQ_TYPE_SET = 0x21  # Class, Interface, Host-to-Device

# Camera Terminal (CT) control selectors
CT_SCANNING_MODE = 0x01
CT_AE_MODE = 0x02
CT_AE_PRIORITY = 0x03
CT_EXPOSURE_TIME_ABSOLUTE = 0x04
CT_FOCUS_ABSOLUTE = 0x06
CT_FOCUS_AUTO = 0x08
CT_IRIS_ABSOLUTE = 0x09
CT_ZOOM_ABSOLUTE = 0x0B
CT_PANTILT_ABSOLUTE = 0x0D
CT_ROLL_ABSOLUTE = 0x0F
CT_PRIVACY = 0x11

# Processing Unit (PU) control selectors
PU_BACKLIGHT_COMPENSATION = 0x01
PU_BRIGHTNESS = 0x02
PU_CONTRAST = 0x03
PU_GAIN = 0x04
PU_POWER_LINE_FREQUENCY = 0x05
PU_HUE = 0x06
PU_SATURATION = 0x07
PU_SHARPNESS = 0x08
PU_GAMMA = 0x09
PU_WHITE_BALANCE_TEMPERATURE = 0x0A
PU_WHITE_BALANCE_TEMPERATURE_AUTO = 0x0B
PU_WHITE_BALANCE_COMPONENT = 0x0C
PU_WHITE_BALANCE_COMPONENT_AUTO = 0x0D
PU_DIGITAL_MULTIPLIER = 0x0E
PU_DIGITAL_MULTIPLIER_LIMIT = 0x0F
PU_HUE_AUTO = 0x10
PU_CONTRAST_AUTO = 0x13

# Request sets
REQUESTS_TOGGLE = frozenset({SET_CUR, GET_CUR, GET_INFO, GET_DEF})
REQUESTS_RANGED = REQUESTS_TOGGLE | {GET_MIN, GET_MAX, GET_RES}
REQUESTS_MODE = REQUESTS_TOGGLE | {GET_RES}
