# exceptions.py
class MacDeviceError(Exception):
    """Base exception for all macdevice errors."""
    pass

class MappingTableError(MacDeviceError):
    """Raised when the device mapping table is missing or malformed."""
    pass

class ResolverError(MacDeviceError):
    """Raised when the host model identifier cannot be read."""
    pass

class ConfigError(MacDeviceError):
    """Raised when configuration is invalid."""
    pass
