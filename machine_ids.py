import os
import uuid
import hashlib
from dataclasses import dataclass
from typing import Callable, Dict, Optional

TELEMETRY_NAMESPACE = "telemetry"

MAC_MACHINE_ID_KEY = f"{TELEMETRY_NAMESPACE}.macMachineId"
MACHINE_ID_KEY = f"{TELEMETRY_NAMESPACE}.machineId"
DEV_DEVICE_ID_KEY = f"{TELEMETRY_NAMESPACE}.devDeviceId"

MANAGED_KEYS = (MAC_MACHINE_ID_KEY, MACHINE_ID_KEY, DEV_DEVICE_ID_KEY)


@dataclass(frozen=True)
class IdentitySet:
    """The three identifiers Cursor uses to recognise a machine.

    primary_id goes verbatim into the machineid file and devDeviceId,
    tertiary_hashed_id is always sha256(primary_id) and
    secondary_hashed_id hashes an unrelated random MAC address.
    """
    primary_id: str
    secondary_hashed_id: str
    tertiary_hashed_id: str

    def as_storage_values(self) -> Dict[str, str]:
        return {
            MAC_MACHINE_ID_KEY: self.secondary_hashed_id,
            MACHINE_ID_KEY: self.tertiary_hashed_id,
            DEV_DEVICE_ID_KEY: self.primary_id,
        }


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def format_mac(raw: bytes) -> str:
    """Render bytes as colon separated lowercase hex octets."""
    return ":".join(f"{b:02x}" for b in raw)


def is_valid_uuid4(text: str) -> bool:
    try:
        parsed = uuid.UUID(text)
    except (ValueError, AttributeError, TypeError):
        return False
    return parsed.version == 4 and str(parsed) == text


class IdentityGenerator:
    """Produces a fresh IdentitySet; entropy sources can be swapped for tests."""

    def __init__(self, uuid_factory: Optional[Callable[[], uuid.UUID]] = None,
                 random_bytes: Optional[Callable[[int], bytes]] = None):
        self.uuid_factory = uuid_factory or uuid.uuid4
        self.random_bytes = random_bytes or os.urandom

    def generate(self) -> IdentitySet:
        primary_id = str(self.uuid_factory())
        mac = format_mac(self.random_bytes(6))
        return IdentitySet(
            primary_id=primary_id,
            secondary_hashed_id=sha256_hex(mac),
            tertiary_hashed_id=sha256_hex(primary_id),
        )


def generate_ids() -> IdentitySet:
    return IdentityGenerator().generate()
