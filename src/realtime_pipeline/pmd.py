"""
Polar sensor payload decoding.

Provides:
- PMD (Polar Measurement Data) ECG frame decoding into Sample batches
- BLE Heart Rate Measurement characteristic parsing

The BLE transport itself (pairing, notifications) lives outside this
package; these functions only turn notification payloads into samples.
"""

from typing import List
from dataclasses import dataclass

import numpy as np

from .buffer import Sample
from .config import Config, default_config


@dataclass(frozen=True)
class PMDFrame:
    """Decoded PMD ECG notification."""
    measurement_type: int
    sensor_timestamp_ns: int  # Sensor clock, bytes 1-8 (little-endian)
    frame_type: int
    values: np.ndarray        # Signed sample values (int64)

    @property
    def n_samples(self) -> int:
        return len(self.values)


def decode_pmd_frame(
    payload: bytes,
    config: Config = default_config,
) -> PMDFrame:
    """
    Decode a PMD ECG data notification.

    Layout: byte 0 measurement type, bytes 1-8 sensor timestamp, byte 9 frame
    type, then 3-byte little-endian two's complement samples.

    Raises
    ------
    ValueError
        If the payload is shorter than the header or is not an ECG frame.
    """
    payload = bytes(payload)
    header = config.PMD_HEADER_BYTES
    if len(payload) < header:
        raise ValueError(f"PMD frame too short: {len(payload)} bytes (header is {header})")
    if payload[0] != config.PMD_MEASUREMENT_ECG:
        raise ValueError(f"Not an ECG frame (measurement type 0x{payload[0]:02x})")

    width = config.PMD_SAMPLE_BYTES
    n_samples = (len(payload) - header) // width
    raw = np.array(bytearray(payload[header:header + n_samples * width]), dtype=np.int64)
    raw = raw.reshape(n_samples, width)

    values = raw[:, 0] | (raw[:, 1] << 8) | (raw[:, 2] << 16)
    values = np.where(values & 0x800000, values - 0x1000000, values)

    return PMDFrame(
        measurement_type=payload[0],
        sensor_timestamp_ns=int.from_bytes(payload[1:9], "little"),
        frame_type=payload[9],
        values=values,
    )


def frame_to_samples(
    frame: PMDFrame,
    received_ms: int,
    config: Config = default_config,
) -> List[Sample]:
    """Stamp frame samples from the arrival time at the nominal sampling interval."""
    offsets = np.floor(np.arange(frame.n_samples) * config.sample_interval_ms + 0.5).astype(np.int64)
    return [
        Sample(timestamp=int(received_ms + offset), value=float(value))
        for offset, value in zip(offsets, frame.values)
    ]


def decode_ecg_frame(
    payload: bytes,
    received_ms: int,
    config: Config = default_config,
) -> List[Sample]:
    """Decode a PMD ECG notification straight into a sample batch."""
    return frame_to_samples(decode_pmd_frame(payload, config), received_ms, config)


def parse_heart_rate(payload: bytes) -> int:
    """
    Parse a BLE Heart Rate Measurement payload.

    Bit 0 of the flags byte selects a 16-bit little-endian value over an
    8-bit one.
    """
    payload = bytes(payload)
    if len(payload) < 2:
        raise ValueError(f"Heart rate payload too short: {len(payload)} bytes")
    flags = payload[0]
    if flags & 0x01:
        if len(payload) < 3:
            raise ValueError("Heart rate payload flags a 16-bit value but has only 2 bytes")
        return int.from_bytes(payload[1:3], "little")
    return payload[1]
