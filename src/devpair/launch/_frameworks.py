"""Static framework tables.

Every table is an immutable mapping keyed by Framework. Lookups go through
``parse_framework`` so an unknown identifier takes an explicit fallback
branch instead of a missing key.
"""

import sys
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from devpair.enums import ServiceSlot


class Framework(StrEnum):
    """Known framework identifiers."""

    REACT_VITE = "react-vite"
    REACT_CRA = "react-cra"
    VUE = "vue"
    ANGULAR = "angular"
    NEXTJS = "nextjs"
    NUXT = "nuxt"
    SVELTE = "svelte"
    EXPRESS = "express"
    NESTJS = "nestjs"
    DJANGO = "django"
    FLASK = "flask"
    FASTAPI = "fastapi"
    SPRING_BOOT = "spring-boot"
    CUSTOM = "custom"


def parse_framework(framework_id: str) -> Framework | None:
    """Return the Framework for an identifier, or None when it is unknown."""
    try:
        return Framework(framework_id)
    except ValueError:
        return None


_WINDOWS = sys.platform == "win32"
_MAVEN_WRAPPER = "mvnw" if _WINDOWS else "./mvnw"
_VENV_ACTIVATE = r".\venv\Scripts\activate" if _WINDOWS else ". venv/bin/activate"

NODE_FRAMEWORKS: Final = frozenset(
    {
        Framework.REACT_VITE,
        Framework.REACT_CRA,
        Framework.VUE,
        Framework.ANGULAR,
        Framework.NEXTJS,
        Framework.NUXT,
        Framework.SVELTE,
        Framework.EXPRESS,
        Framework.NESTJS,
    }
)
PYTHON_FRAMEWORKS: Final = frozenset({Framework.DJANGO, Framework.FLASK, Framework.FASTAPI})

FRONTEND_COMMANDS: Final = MappingProxyType(
    {
        Framework.REACT_VITE: "npm run dev",
        Framework.REACT_CRA: "npm start",
        Framework.VUE: "npm run dev",
        Framework.ANGULAR: "npm start",
        Framework.NEXTJS: "npm run dev",
        Framework.NUXT: "npm run dev",
        Framework.SVELTE: "npm run dev",
    }
)

BACKEND_COMMANDS: Final = MappingProxyType(
    {
        Framework.EXPRESS: "npm run dev",
        Framework.NESTJS: "npm run start:dev",
        Framework.DJANGO: "python manage.py runserver",
        Framework.FLASK: "python -m flask run",
        Framework.FASTAPI: "python -m uvicorn main:app --reload",
        Framework.SPRING_BOOT: f"{_MAVEN_WRAPPER} spring-boot:run",
    }
)

DEFAULT_COMMANDS: Final = MappingProxyType(
    {
        ServiceSlot.FRONTEND: "npm start",
        ServiceSlot.BACKEND: "npm start",
    }
)

FRAMEWORK_PORTS: Final = MappingProxyType(
    {
        Framework.REACT_VITE: 5173,
        Framework.REACT_CRA: 3000,
        Framework.VUE: 8080,
        Framework.ANGULAR: 4200,
        Framework.NEXTJS: 3000,
        Framework.NUXT: 3000,
        Framework.SVELTE: 5173,
        Framework.EXPRESS: 3000,
        Framework.NESTJS: 3000,
        Framework.DJANGO: 8000,
        Framework.FLASK: 5000,
        Framework.FASTAPI: 8000,
        Framework.SPRING_BOOT: 8080,
    }
)

DEFAULT_PORTS: Final = MappingProxyType(
    {
        ServiceSlot.FRONTEND: 3000,
        ServiceSlot.BACKEND: 8080,
    }
)

_PYTHON_INSTALL = f"python -m venv venv && {_VENV_ACTIVATE} && pip install -r requirements.txt"

INSTALL_COMMANDS: Final = MappingProxyType(
    {
        **dict.fromkeys(NODE_FRAMEWORKS, "npm install"),
        **dict.fromkeys(PYTHON_FRAMEWORKS, _PYTHON_INSTALL),
        Framework.SPRING_BOOT: f"{_MAVEN_WRAPPER} install",
    }
)

DEFAULT_INSTALL_COMMAND: Final = "npm install"

# Directories whose presence shows dependencies were installed
DEPENDENCY_MARKERS: Final = MappingProxyType(
    {
        **dict.fromkeys(NODE_FRAMEWORKS, ("node_modules",)),
        **dict.fromkeys(PYTHON_FRAMEWORKS, ("venv", ".venv")),
        Framework.SPRING_BOOT: ("target",),
    }
)

DEFAULT_DEPENDENCY_MARKERS: Final = ("node_modules",)
