from typing import Any, Dict, Optional


class DotDict:
    """
    Read access to nested configuration sections with dot notation:
    config.pca9685.address

    Nested dicts are wrapped on access, so the wrapper always reflects the
    underlying data, including later updates to it.
    """

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    def __getattr__(self, key: str) -> Any:
        if key.startswith('_') or key not in self._data:
            raise AttributeError(f"Config has no attribute '{key}'")
        return self[key]

    def __getitem__(self, key: str) -> Any:
        value = self._data[key]
        return DotDict(value) if isinstance(value, dict) else value

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self[key] if key in self._data else default

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        """Integer value of ``key``; strings such as ``"0x40"`` are parsed
        with their prefix. A missing key or ``None`` gives ``default``."""
        value = self._data.get(key)
        if value is None:
            return default
        if isinstance(value, str):
            return int(value, 0)
        return int(value)

    def to_dict(self) -> Dict[str, Any]:
        return self._data

    def __repr__(self) -> str:
        return f"DotDict({self._data})"
