"""Import of connection settings from the KS-APW installation."""

from .apman import ApmanSettings, descriptor_from_apman, find_apman_ini, parse_apman_ini
from .license import find_license_file, read_license_client_id

__all__ = [
    "ApmanSettings",
    "descriptor_from_apman",
    "find_apman_ini",
    "find_license_file",
    "parse_apman_ini",
    "read_license_client_id",
]
