"""Location of the archive a module was imported from."""

import sys
import zipimport
from types import ModuleType
from typing import Any, Optional


def _module_of(obj: Any) -> Optional[ModuleType]:
    if isinstance(obj, ModuleType):
        return obj
    module_name = getattr(obj, "__module__", None)
    if module_name is None:
        return None
    return sys.modules.get(module_name)


def get_archive_path(obj: Any) -> Optional[str]:
    """모듈 또는 클래스가 로드된 아카이브 경로를 반환합니다.

    Args:
        obj: A module, a class, or anything with a ``__module__`` attribute

    Returns:
        str | None: Path of the zip (or jar) the module was imported from
        through ``zipimport``, None if it was not imported from an archive

    Examples:
        # Class imported from a zip put on sys.path
        sys.path.insert(0, "plugins.zip")
        from plugin import Plugin
        get_archive_path(Plugin)  # "plugins.zip"
    """
    if obj is None:
        return None
    module = _module_of(obj)
    if module is None:
        return None

    loader = getattr(module, "__loader__", None)
    if isinstance(loader, zipimport.zipimporter):
        return loader.archive
    return None
