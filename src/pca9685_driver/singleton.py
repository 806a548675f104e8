"""
Singleton metaclass shared by the logger and the configuration.
"""

from typing import Any, Dict


class Singleton(type):
    """
    Metaclass that keeps one instance per class.

    ``reset()`` drops cached instances, which lets a process reload its
    configuration from another file.
    """

    _instances: Dict[type, Any] = {}

    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]

    @classmethod
    def reset(mcs, target: type = None) -> None:
        if target is None:
            mcs._instances.clear()
        else:
            mcs._instances.pop(target, None)


__all__ = [
    'Singleton',
]
