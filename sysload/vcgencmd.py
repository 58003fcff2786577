"""SoC temperature through the VideoCore mailbox ``gencmd`` interface."""

from __future__ import annotations

import fcntl
import os
import re
import struct

DEVICE_FILE_NAME = "/dev/vcio"
MAX_STRING = 1024
GET_GENCMD_RESULT = 0x00030080

_MAJOR_NUM = 100
_IOC_READ_WRITE = 3
IOCTL_MBOX_PROPERTY = (
    (_IOC_READ_WRITE << 30) | (struct.calcsize("P") << 16) | (_MAJOR_NUM << 8) | 0
)

_HEADER = struct.Struct("=6I")
_END_TAG = struct.Struct("=I")
_ERROR_OFFSET = 20
_TEMPERATURE = re.compile(r"temp=\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


class GencmdError(Exception):
    """A gencmd request could not be made or was answered with an error."""


def build_gencmd_message(command: str) -> bytes:
    """Build the mailbox property message that carries ``command``."""
    encoded = command.encode("ascii")
    if len(encoded) + 1 >= MAX_STRING:
        raise GencmdError(f"gencmd length too long : {len(encoded)}")
    size = _HEADER.size + MAX_STRING + _END_TAG.size
    header = _HEADER.pack(size, 0, GET_GENCMD_RESULT, MAX_STRING, 0, 0)
    return header + encoded.ljust(MAX_STRING, b"\0") + _END_TAG.pack(0)


def parse_gencmd_response(buffer: bytes | bytearray) -> str:
    """Return the response text of a completed message, raising on an error code."""
    data = bytes(buffer)
    if len(data) < _HEADER.size:
        raise ValueError("gencmd response is too short")
    (error,) = struct.unpack_from("=I", data, _ERROR_OFFSET)
    if error:
        raise GencmdError(f"gencmd failed with error {error}")
    text = data[_HEADER.size:_HEADER.size + MAX_STRING].split(b"\0", 1)[0]
    return text.decode("ascii", errors="replace")


def parse_temperature(text: str) -> float:
    """Extract the degrees Celsius from a ``temp=48.3'C`` response."""
    match = _TEMPERATURE.match(text)
    if not match:
        raise ValueError(f"not a temperature response: {text!r}")
    return float(match.group(1))


class Mailbox:
    """An open connection to the mailbox character device."""

    def __init__(self, device: str | os.PathLike = DEVICE_FILE_NAME) -> None:
        self.device = device
        self._fd: int | None = None

    def __enter__(self) -> Mailbox:
        self._fd = os.open(self.device, os.O_RDONLY)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def gencmd(self, command: str) -> str:
        """Send ``command`` to the firmware and return its answer."""
        if self._fd is None:
            raise GencmdError("mailbox is not open")
        buffer = bytearray(build_gencmd_message(command))
        try:
            fcntl.ioctl(self._fd, IOCTL_MBOX_PROPERTY, buffer, True)
        except OSError as exc:
            raise GencmdError(f"ioctl_set_msg failed: {exc}") from exc
        return parse_gencmd_response(buffer)


def read_temp(device: str | os.PathLike = DEVICE_FILE_NAME) -> float:
    """Return the SoC temperature in degrees Celsius."""
    with Mailbox(device) as mailbox:
        return parse_temperature(mailbox.gencmd("measure_temp"))