"""Framework detection from project files.

Inspects well-known files in a service directory for framework markers.
Markers are checked in order; the first match wins.
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path

from devpair.enums import ServiceSlot

from ._frameworks import Framework


@dataclass(frozen=True, slots=True)
class FrameworkMarker:
    """A file pattern that identifies a framework.

    Attributes:
        framework: The framework the marker identifies.
        files: Candidate files to read, in order.
        pattern: Regex that must match the file content.
        extra: Optional second regex that must also match.
    """

    framework: Framework
    files: tuple[str, ...]
    pattern: re.Pattern[str]
    extra: re.Pattern[str] | None = None

    def matches(self, content: str) -> bool:
        if not self.pattern.search(content):
            return False
        return self.extra is None or bool(self.extra.search(content))


FRONTEND_MARKERS: tuple[FrameworkMarker, ...] = (
    FrameworkMarker(Framework.REACT_VITE, ("package.json",), re.compile(r'"vite"'), re.compile(r'"react"')),
    FrameworkMarker(Framework.REACT_CRA, ("package.json",), re.compile(r'"react-scripts"')),
    FrameworkMarker(Framework.VUE, ("package.json",), re.compile(r'"vue"')),
    FrameworkMarker(Framework.ANGULAR, ("angular.json", "package.json"), re.compile(r'"@angular/core"')),
    FrameworkMarker(Framework.NEXTJS, ("package.json",), re.compile(r'"next"')),
    FrameworkMarker(Framework.NUXT, ("package.json",), re.compile(r'"nuxt"')),
    FrameworkMarker(Framework.SVELTE, ("package.json",), re.compile(r'"svelte"')),
)

BACKEND_MARKERS: tuple[FrameworkMarker, ...] = (
    FrameworkMarker(Framework.EXPRESS, ("package.json",), re.compile(r'"express"')),
    FrameworkMarker(Framework.NESTJS, ("package.json",), re.compile(r'"@nestjs/core"')),
    FrameworkMarker(Framework.DJANGO, ("manage.py",), re.compile(r"django", re.IGNORECASE)),
    FrameworkMarker(Framework.FLASK, ("requirements.txt", "app.py"), re.compile(r"flask", re.IGNORECASE)),
    FrameworkMarker(Framework.FASTAPI, ("requirements.txt", "main.py"), re.compile(r"fastapi", re.IGNORECASE)),
    FrameworkMarker(
        Framework.SPRING_BOOT, ("pom.xml", "build.gradle"), re.compile(r"spring-boot", re.IGNORECASE)
    ),
)

SCRIPT_CANDIDATES = ("dev", "start", "serve", "watch")


def detect_framework(directory: Path, slot: ServiceSlot) -> Framework | None:
    """Detect a directory's framework for the given slot.

    Args:
        directory: The service directory to inspect.
        slot: Which marker set to use.

    Returns:
        The detected Framework, or None if nothing matched.
    """
    if not directory.is_dir():
        return None

    markers = FRONTEND_MARKERS if slot is ServiceSlot.FRONTEND else BACKEND_MARKERS
    for marker in markers:
        for filename in marker.files:
            path = directory / filename
            if not path.is_file():
                continue
            content = path.read_text(encoding="utf-8", errors="replace")
            if marker.matches(content):
                return marker.framework

    return None


def recommend_script(directory: Path) -> str | None:
    """Recommend an ``npm run`` command from package.json scripts.

    Returns:
        ``npm run <name>`` for the first of dev/start/serve/watch that is
        defined, or None when package.json is absent, unreadable or has
        none of them.
    """
    package_json = directory / "package.json"
    if not package_json.is_file():
        return None

    try:
        package = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None

    scripts = package.get("scripts") if isinstance(package, dict) else None
    if not isinstance(scripts, dict):
        return None

    for candidate in SCRIPT_CANDIDATES:
        if scripts.get(candidate):
            return f"npm run {candidate}"
    return None
