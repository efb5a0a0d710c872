class Io:
    ACCESS_POINT = "192.168.4.1"
    WS_PATH = "/ws"

    # frames are signed bytes
    POWER_MIN = -128
    POWER_MAX = 127
